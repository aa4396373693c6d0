"""Answer state helpers used around the rule evaluator and navigation resolver.

Hydrates a fresh question set with respondent answers, clears answers for
questions whose prerequisites no longer hold, and builds the per-section
"has any answer" predicate consumed by forward navigation.
"""

from __future__ import annotations

from typing import Callable, Iterable, Sequence
import logging

from portal.logic.rule_evaluator import should_reset_question_answers
from portal.models.questionnaire import DataType, Question, RespondentAnswer

logger = logging.getLogger(__name__)


def update_with_respondent_answers(
    questions: Sequence[Question],
    respondent_answers: Iterable[RespondentAnswer],
) -> None:
    """Copy saved respondent answers onto matching questions in place.

    Answers for unknown question ids are ignored.
    """
    by_id = {q.question_id: q for q in questions}
    for saved in respondent_answers:
        question = by_id.get(saved.question_id)
        if question is None:
            logger.info("respondent_answer_unmatched question_id=%s", saved.question_id)
            continue
        question.answer_text = saved.answer_text
        question.day = saved.day
        question.month = saved.month
        question.year = saved.year
        if question.data_type is DataType.MULTI_CHOICE:
            chosen = set(saved.answers)
            for answer in question.answers:
                answer.is_selected = answer.answer_id in chosen
        else:
            question.selected_option = saved.selected_option


def section_has_answers(questions: Iterable[Question], section_id: str) -> bool:
    """True when at least one question in the section has a non-missing answer."""
    return any(q.section_id == section_id and not q.is_missing_answer() for q in questions)


def has_answers_predicate(questions: Sequence[Question]) -> Callable[[str], bool]:
    """Bind `section_has_answers` to a question set for the navigation resolver."""

    def has_answers(section_id: str) -> bool:
        return section_has_answers(questions, section_id)

    return has_answers


def reset_inapplicable_answers(questions: Sequence[Question]) -> list[str]:
    """Clear answers of questions whose parent rules are no longer satisfied.

    Clearing a parent can invalidate its own dependants, so passes repeat
    until a pass clears nothing. Returns cleared question ids in clearing
    order; questions already without answers are not reported.
    """
    cleared: list[str] = []
    # each productive pass clears at least one question, so this terminates
    for _ in range(len(questions) + 1):
        changed = False
        for question in questions:
            if question.is_missing_answer():
                continue
            if should_reset_question_answers(question, questions):
                question.clear_answers()
                cleared.append(question.question_id)
                changed = True
        if not changed:
            break
    if cleared:
        logger.info("answers_reset question_ids=%s", cleared)
    return cleared


__all__ = [
    "update_with_respondent_answers",
    "section_has_answers",
    "has_answers_predicate",
    "reset_inapplicable_answers",
]
