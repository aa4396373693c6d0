"""Question applicability endpoints.

Implements:
- POST /api/v1/questions/applicability
  - Evaluates each question's parent-dependent rules against the others
- POST /api/v1/questions/reset
  - Clears answers of questions whose prerequisites are no longer met
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from portal.logic.answer_state import reset_inapplicable_answers
from portal.logic.rule_evaluator import is_rule_applicable, should_reset_question_answers
from portal.models.api import ApplicabilityItem, ApplicabilityResult, QuestionsRequest, ResetResult

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/api/v1/questions/applicability",
    summary="Evaluate conditional applicability for a set of questions",
    operation_id="evaluateApplicability",
    response_model=ApplicabilityResult,
)
def evaluate_applicability(body: QuestionsRequest) -> ApplicabilityResult:
    questions = body.questions
    items = []
    for question in questions:
        conditional = bool(question.parent_rules())
        applicable = is_rule_applicable(question, questions)
        items.append(
            ApplicabilityItem(
                question_id=question.question_id,
                conditional=conditional,
                applicable=applicable,
                visible=applicable or not conditional,
                should_reset=should_reset_question_answers(question, questions),
                conditions=[c for r in question.parent_rules() for c in r.conditions],
            )
        )
    logger.info(
        "applicability_evaluated questions=%s hidden=%s",
        len(items),
        [i.question_id for i in items if not i.visible],
    )
    return ApplicabilityResult(items=items)


@router.post(
    "/api/v1/questions/reset",
    summary="Clear answers of questions that no longer apply",
    operation_id="resetInapplicableAnswers",
    response_model=ResetResult,
)
def reset_answers(body: QuestionsRequest) -> ResetResult:
    questions = body.questions
    cleared = reset_inapplicable_answers(questions)
    return ResetResult(reset_question_ids=cleared, questions=questions)


__all__ = ["router"]
