"""Question-set builder.

Turns a CMS question-set document into the engine's `Section` and
`Question` models. The document shape follows the CMS response:

    {"id": ..., "version": ..., "sections": [
        {"id", "sectionName", "staticViewName", "categoryId", "sequence",
         "isMandatory", "questions": [
            {"id", "name", "answerDataType", "conformance", "sequence",
             "answers": [{"id", "optionName"}],
             "validationRules": [
                {"mode", "description", "parentQuestion": {"id"},
                 "conditions": [{"operator", "mode", "negate", "optionType",
                                 "parentOptions": [{"id"}]}]}]}]}]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from portal.models.journey import Journey
from portal.models.navigation import Section
from portal.models.questionnaire import Answer, Condition, DataType, Question, Rule

logger = logging.getLogger(__name__)

REVIEW_VIEW_NAME = "reviewchanges"


def _build_condition(raw: Dict[str, Any]) -> Condition:
    parent_options = [str(opt.get("id")) for opt in (raw.get("parentOptions") or []) if opt.get("id") is not None]
    return Condition(
        operator=raw.get("operator") or "",
        mode=raw.get("mode") or "AND",
        option_type=raw.get("optionType"),
        negate=bool(raw.get("negate", False)),
        parent_options=parent_options,
        description=raw.get("description"),
        is_applicable=True,
    )


def _build_rule(raw: Dict[str, Any], sequence: int) -> Rule:
    parent = raw.get("parentQuestion") or {}
    parent_id = parent.get("id")
    return Rule(
        sequence=sequence,
        mode=raw.get("mode") or "AND",
        parent_question_id=str(parent_id) if parent_id is not None else None,
        conditions=[_build_condition(c) for c in (raw.get("conditions") or [])],
        description=raw.get("description"),
    )


def _build_question(raw: Dict[str, Any], section: Section, position: int) -> Question:
    sequence = int(raw.get("sequence") or 0)
    return Question(
        question_id=str(raw["id"]),
        section_id=section.section_id,
        category_id=str(raw.get("categoryId") or section.category_id),
        data_type=DataType.from_cms(raw.get("answerDataType")),
        question_text=raw.get("name") or "",
        # CMS leaves sequence at 0 when authors rely on document order
        sequence=sequence if sequence else position,
        section_sequence=section.sequence,
        is_mandatory=raw.get("conformance") == "Mandatory",
        answers=[
            Answer(answer_id=str(a.get("id") or ""), answer_text=a.get("optionName") or "")
            for a in (raw.get("answers") or [])
        ],
        rules=[_build_rule(r, i) for i, r in enumerate(raw.get("validationRules") or [])],
    )


def _build_section(raw: Dict[str, Any]) -> Section:
    view_name = raw.get("staticViewName") or ""
    return Section(
        section_id=str(raw["id"]),
        category_id=str(raw.get("categoryId") or ""),
        static_view_name=view_name,
        section_name=raw.get("sectionName") or "",
        sequence=int(raw.get("sequence") or 0),
        is_mandatory=bool(raw.get("isMandatory", False)),
        is_review=bool(raw.get("isReview", view_name.lower() == REVIEW_VIEW_NAME)),
        is_last_section_before_review=bool(raw.get("isLastSectionBeforeReview", False)),
    )


def build_journey(document: Dict[str, Any]) -> Journey:
    """Build a Journey from a single CMS question-set document."""
    if not isinstance(document, dict) or "id" not in document:
        raise ValueError("question_set_missing_id")
    sections: List[Section] = []
    questions: List[Question] = []
    for raw_section in document.get("sections") or []:
        section = _build_section(raw_section)
        sections.append(section)
        for position, raw_question in enumerate(raw_section.get("questions") or [], start=1):
            questions.append(_build_question(raw_question, section, position))
    journey = Journey(
        journey_id=str(document["id"]),
        version=(str(document["version"]) if document.get("version") is not None else None),
        sections=sections,
        questions=questions,
    )
    logger.info(
        "journey_built journey_id=%s sections=%s questions=%s",
        journey.journey_id,
        len(sections),
        len(questions),
    )
    return journey


def load_journey_file(path: str | Path) -> List[Journey]:
    """Load one or more question-set documents from a JSON or YAML file."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    suffix = p.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    elif suffix == ".json":
        data = json.loads(text)
    else:
        raise ValueError(f"unsupported_journey_file suffix={suffix}")
    documents = data if isinstance(data, list) else [data]
    return [build_journey(doc) for doc in documents]


__all__ = ["build_journey", "load_journey_file"]
