"""Section, navigation state and route target models.

NavigationState is the only piece of state threaded between wizard steps.
It is immutable and serialises to JSON so callers can hand it back on the
next request instead of keeping it in a session dictionary.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Section(BaseModel):
    model_config = ConfigDict(frozen=True)

    section_id: str
    category_id: str = ""
    static_view_name: str = ""
    section_name: str = ""
    sequence: int = 0
    is_mandatory: bool = False
    is_review: bool = False
    is_last_section_before_review: bool = False


class NavigationState(BaseModel):
    model_config = ConfigDict(frozen=True)

    previous_stage: str = ""
    previous_category: str = ""
    previous_section: Optional[Section] = None
    current_stage: str = ""
    current_category: str = ""
    current_section: Optional[Section] = None
    next_stage: str = ""
    next_category: str = ""
    next_section: Optional[Section] = None

    @property
    def has_next(self) -> bool:
        return bool(self.next_stage)

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "NavigationState":
        return cls.model_validate_json(raw)


class WizardContext(BaseModel):
    """Identifiers the web layer needs to build redirect parameters."""

    project_record_id: str = ""
    specific_area_of_change_id: str = ""
    modification_change_id: str = ""


class RouteTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    route_name: str
    parameters: dict[str, Union[bool, str]] = Field(default_factory=dict)
    text: Optional[str] = None


__all__ = ["Section", "NavigationState", "WizardContext", "RouteTarget"]
