"""Question, rule and condition models for the modification questionnaire.

Questions are built per request from a question-set document plus any
respondent answers, and are discarded once the request completes. Rules and
conditions declare when a question applies; `Condition.is_applicable` is the
only field the rule evaluator writes back.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


IN_OPERATOR = "IN"


class DataType(str, Enum):
    """Closed set of answer shapes understood by the rule evaluator."""

    SINGLE_CHOICE = "SingleChoice"
    MULTI_CHOICE = "MultiChoice"
    FREE_TEXT = "FreeText"
    DATE = "Date"

    @classmethod
    def from_cms(cls, raw: object) -> "DataType":
        """Map a CMS `answerDataType` label onto a DataType.

        Labels the engine does not branch on (Text, Email, Look-up list, ...)
        are treated as free text.
        """
        if isinstance(raw, DataType):
            return raw
        label = str(raw or "").strip().lower()
        if label in {"boolean", "radio button", "singlechoice"}:
            return cls.SINGLE_CHOICE
        if label in {"checkbox", "multichoice"}:
            return cls.MULTI_CHOICE
        if label == "date":
            return cls.DATE
        return cls.FREE_TEXT


class Mode(str, Enum):
    AND = "AND"
    OR = "OR"


class OptionType(str, Enum):
    SINGLE = "Single"
    EXACT = "Exact"
    ANY = "Any"


class Answer(BaseModel):
    answer_id: str
    answer_text: str = ""
    is_selected: bool = False


class Condition(BaseModel):
    operator: str = IN_OPERATOR
    mode: Mode = Mode.AND
    option_type: OptionType = OptionType.ANY
    negate: bool = False
    parent_options: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    # Output only: last evaluation result, kept for display
    is_applicable: bool = True

    @field_validator("mode", mode="before")
    @classmethod
    def _mode_upper(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("option_type", mode="before")
    @classmethod
    def _option_type_default(cls, v: object) -> object:
        # Anything other than Single/Exact means "any overlap"
        if isinstance(v, OptionType):
            return v
        label = str(v or "").strip().lower()
        if label == "single":
            return OptionType.SINGLE
        if label == "exact":
            return OptionType.EXACT
        return OptionType.ANY

    @field_validator("operator", mode="before")
    @classmethod
    def _operator_upper(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v


class Rule(BaseModel):
    sequence: int = 0
    mode: Mode = Mode.AND
    parent_question_id: Optional[str] = None
    conditions: list[Condition] = Field(default_factory=list)
    description: Optional[str] = None

    @field_validator("mode", mode="before")
    @classmethod
    def _mode_upper(cls, v: object) -> object:
        return v.strip().upper() if isinstance(v, str) else v


class Question(BaseModel):
    question_id: str
    section_id: str = ""
    category_id: str = ""
    data_type: DataType = DataType.FREE_TEXT
    question_text: str = ""
    sequence: int = 0
    section_sequence: int = 0
    is_mandatory: bool = False
    answers: list[Answer] = Field(default_factory=list)
    selected_option: Optional[str] = None
    answer_text: Optional[str] = None
    day: Optional[str] = None
    month: Optional[str] = None
    year: Optional[str] = None
    rules: list[Rule] = Field(default_factory=list)

    @field_validator("data_type", mode="before")
    @classmethod
    def _data_type_from_label(cls, v: object) -> DataType:
        return DataType.from_cms(v)

    def selected_answer_ids(self) -> list[str]:
        return [a.answer_id for a in self.answers if a.is_selected]

    def parent_rules(self) -> list[Rule]:
        """Rules that depend on another question's answer."""
        return [r for r in self.rules if r.parent_question_id is not None]

    def is_missing_answer(self) -> bool:
        """True when nothing at all has been entered for this question."""
        text_parts = (self.answer_text, self.selected_option, self.day, self.month, self.year)
        if any(p is not None and str(p).strip() for p in text_parts):
            return False
        return not self.selected_answer_ids()

    def clear_answers(self) -> None:
        self.selected_option = None
        self.answer_text = None
        self.day = None
        self.month = None
        self.year = None
        for answer in self.answers:
            answer.is_selected = False


class RespondentAnswer(BaseModel):
    """Answer previously saved by the respondent for one question."""

    question_id: str
    selected_option: Optional[str] = None
    answer_text: Optional[str] = None
    answers: list[str] = Field(default_factory=list)
    day: Optional[str] = None
    month: Optional[str] = None
    year: Optional[str] = None


__all__ = [
    "IN_OPERATOR",
    "DataType",
    "Mode",
    "OptionType",
    "Answer",
    "Condition",
    "Rule",
    "Question",
    "RespondentAnswer",
]
