"""Journey model: the sections and question template of one area of change."""

from __future__ import annotations

from pydantic import BaseModel, Field

from portal.models.navigation import Section
from portal.models.questionnaire import Question


class Journey(BaseModel):
    journey_id: str
    version: str | None = None
    sections: list[Section] = Field(default_factory=list)
    questions: list[Question] = Field(default_factory=list)


__all__ = ["Journey"]
