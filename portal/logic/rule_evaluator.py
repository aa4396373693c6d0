"""Conditional applicability rules for questionnaire questions.

A question carries rules that point at a parent question. Each rule holds
conditions matched against the parent's current selection. Rules and
conditions are combined in two independent AND/OR levels using the same
group-combination rule (`process_evaluations`).

Nothing here raises for irregular input: a missing parent, an empty rule
list or an unknown operator all count as "not satisfied".
"""

from __future__ import annotations

from typing import Iterable, NamedTuple, Optional, Sequence
import logging

from portal.models.questionnaire import (
    IN_OPERATOR,
    Condition,
    DataType,
    Mode,
    OptionType,
    Question,
    Rule,
)

logger = logging.getLogger(__name__)


class ConditionOutcome(NamedTuple):
    result: bool
    no_selection: bool


def _empty_buckets() -> dict[Mode, list[bool]]:
    return {Mode.AND: [], Mode.OR: []}


def _find_question(question_id: str, questions: Iterable[Question]) -> Optional[Question]:
    for q in questions:
        if q.question_id == question_id:
            return q
    return None


def process_evaluations(evaluations: dict[Mode, list[bool]]) -> bool:
    """Combine AND and OR buckets into a single verdict.

    The buckets are not symmetric: a fully true AND bucket wins before the
    OR bucket is consulted, and an all-false pair is rejected first.
    """
    and_group = evaluations.get(Mode.AND, [])
    or_group = evaluations.get(Mode.OR, [])

    if not and_group and not or_group:
        return False
    if not any(and_group) and not any(or_group):
        return False
    if all(and_group):
        return True
    if any(or_group):
        return True
    return False


def evaluate_condition(condition: Condition, parent: Question) -> ConditionOutcome:
    """Evaluate one condition against the parent question's selection."""
    if condition.operator != IN_OPERATOR:
        return ConditionOutcome(False, False)

    if parent.data_type is DataType.SINGLE_CHOICE:
        selected = parent.selected_option
        if selected is None or not selected.strip():
            return ConditionOutcome(False, True)
        return ConditionOutcome(selected in condition.parent_options, False)

    if parent.data_type is DataType.MULTI_CHOICE:
        selected_ids = parent.selected_answer_ids()
        if not selected_ids:
            return ConditionOutcome(False, True)
        allowed = set(condition.parent_options)
        matched = {a for a in selected_ids if a in allowed}
        if condition.option_type is OptionType.SINGLE:
            return ConditionOutcome(len(selected_ids) == 1 and len(matched) == 1, False)
        if condition.option_type is OptionType.EXACT:
            return ConditionOutcome(len(matched) == len(set(selected_ids)), False)
        return ConditionOutcome(bool(matched), False)

    # FREE_TEXT and DATE parents carry no selection to match against
    return ConditionOutcome(False, False)


def evaluate_rule(rule: Rule, questions: Sequence[Question]) -> bool:
    """Evaluate all IN conditions of a rule against its parent question.

    Records each condition's (possibly negated) result on
    `condition.is_applicable`.
    """
    parent = _find_question(str(rule.parent_question_id), questions)
    if parent is None:
        logger.warning(
            "rule_parent_missing parent_question_id=%s sequence=%s",
            rule.parent_question_id,
            rule.sequence,
        )
        return False

    evaluations = _empty_buckets()
    for condition in rule.conditions:
        if condition.operator != IN_OPERATOR:
            continue
        outcome = evaluate_condition(condition, parent)
        result = outcome.result
        # a missing selection is never turned into a match by negation
        if not outcome.no_selection and condition.negate:
            result = not result
        condition.is_applicable = result
        evaluations[condition.mode].append(result)

    return process_evaluations(evaluations)


def is_rule_applicable(question: Question, all_questions: Sequence[Question]) -> bool:
    """Return True when the question's parent-dependent rules are satisfied."""
    rules = sorted(question.parent_rules(), key=lambda r: r.sequence)

    evaluations = _empty_buckets()
    for rule in rules:
        evaluations[rule.mode].append(evaluate_rule(rule, all_questions))

    verdict = process_evaluations(evaluations)
    logger.debug(
        "rule_evaluation question_id=%s and=%s or=%s applicable=%s",
        question.question_id,
        evaluations[Mode.AND],
        evaluations[Mode.OR],
        verdict,
    )
    return verdict


def should_reset_question_answers(question: Question, all_questions: Sequence[Question]) -> bool:
    """Return True when a previously entered answer should be discarded.

    Questions without parent-dependent rules are never reset.
    """
    if not question.parent_rules():
        return False
    return not is_rule_applicable(question, all_questions)


__all__ = [
    "ConditionOutcome",
    "process_evaluations",
    "evaluate_condition",
    "evaluate_rule",
    "is_rule_applicable",
    "should_reset_question_answers",
]
