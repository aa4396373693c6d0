"""Pydantic request and response bodies for the HTTP routes."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from portal.models.navigation import NavigationState, RouteTarget, Section, WizardContext
from portal.models.questionnaire import Condition, Question, RespondentAnswer


class QuestionsRequest(BaseModel):
    questions: List[Question]


class ApplicabilityItem(BaseModel):
    question_id: str
    # False for questions without parent-dependent rules
    conditional: bool
    applicable: bool
    visible: bool
    should_reset: bool
    conditions: List[Condition] = Field(default_factory=list)


class ApplicabilityResult(BaseModel):
    items: List[ApplicabilityItem]


class ResetResult(BaseModel):
    reset_question_ids: List[str]
    questions: List[Question]


class JourneyView(BaseModel):
    journey_id: str
    version: Optional[str] = None
    sections: List[Section]


class NavigationRequest(BaseModel):
    current_section_id: str
    answers: List[RespondentAnswer] = Field(default_factory=list)
    review_in_progress: bool = False
    context: WizardContext = Field(default_factory=WizardContext)


class NavigationResult(BaseModel):
    navigation: NavigationState
    next_step: RouteTarget
    reset_question_ids: List[str] = Field(default_factory=list)


class BackLinkRequest(BaseModel):
    navigation: Optional[NavigationState] = None
    answers: List[RespondentAnswer] = Field(default_factory=list)
    back_from_review: bool = False
    review_in_progress: bool = False
    context: WizardContext = Field(default_factory=WizardContext)


__all__ = [
    "QuestionsRequest",
    "ApplicabilityItem",
    "ApplicabilityResult",
    "ResetResult",
    "JourneyView",
    "NavigationRequest",
    "NavigationResult",
    "BackLinkRequest",
]
