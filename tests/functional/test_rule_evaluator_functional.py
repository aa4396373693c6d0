"""Functional tests for conditional question applicability.

Covers single-choice and multi-choice condition matching, negation with and
without a parent selection, the two-level AND/OR group combination, and the
answer-reset companion check.
"""

from __future__ import annotations

import itertools
from typing import List, Optional

import pytest

from portal.logic.rule_evaluator import (
    evaluate_condition,
    is_rule_applicable,
    process_evaluations,
    should_reset_question_answers,
)
from portal.models.questionnaire import (
    Answer,
    Condition,
    DataType,
    Mode,
    OptionType,
    Question,
    Rule,
)


# -----------------------------
# Builders
# -----------------------------

def _single(qid: str, selected: Optional[str]) -> Question:
    return Question(
        question_id=qid,
        data_type=DataType.SINGLE_CHOICE,
        answers=[Answer(answer_id="A"), Answer(answer_id="B")],
        selected_option=selected,
    )


def _multi(qid: str, selected: List[str], options=("A", "B", "C")) -> Question:
    return Question(
        question_id=qid,
        data_type=DataType.MULTI_CHOICE,
        answers=[Answer(answer_id=o, is_selected=o in selected) for o in options],
    )


def _condition(options, option_type=OptionType.ANY, negate=False, mode=Mode.AND, operator="IN") -> Condition:
    return Condition(
        operator=operator,
        mode=mode,
        option_type=option_type,
        negate=negate,
        parent_options=list(options),
    )


def _rule(parent_id: Optional[str], *conditions: Condition, mode=Mode.AND, sequence=0) -> Rule:
    return Rule(sequence=sequence, mode=mode, parent_question_id=parent_id, conditions=list(conditions))


def _child(*rules: Rule) -> Question:
    return Question(question_id="child", data_type=DataType.FREE_TEXT, rules=list(rules))


# -----------------------------
# Single-choice parents
# -----------------------------

def test_single_choice_selected_option_in_parent_options_is_applicable():
    parent = _single("parent", "A")
    condition = _condition({"A"}, option_type=OptionType.SINGLE)
    child = _child(_rule("parent", condition))

    assert is_rule_applicable(child, [parent, child]) is True
    assert condition.is_applicable is True


def test_single_choice_negated_match_is_not_applicable():
    parent = _single("parent", "A")
    condition = _condition({"A"}, option_type=OptionType.SINGLE, negate=True)
    child = _child(_rule("parent", condition))

    assert is_rule_applicable(child, [parent, child]) is False
    assert condition.is_applicable is False


def test_negation_is_suppressed_when_parent_has_no_selection():
    parent = _single("parent", None)
    condition = _condition({"A"}, option_type=OptionType.SINGLE, negate=True)
    child = _child(_rule("parent", condition))

    assert is_rule_applicable(child, [parent, child]) is False
    assert condition.is_applicable is False


def test_blank_single_selection_counts_as_no_selection():
    outcome = evaluate_condition(_condition({"A"}), _single("parent", "   "))
    assert outcome.result is False
    assert outcome.no_selection is True


def test_negated_non_match_is_applicable():
    parent = _single("parent", "B")
    child = _child(_rule("parent", _condition({"A"}, negate=True)))

    assert is_rule_applicable(child, [parent, child]) is True


# -----------------------------
# Multi-choice parents
# -----------------------------

def test_exact_option_type_requires_every_selected_answer_to_be_allowed():
    parent = _multi("parent", ["A", "C"])

    exact_match = _child(_rule("parent", _condition({"A", "C"}, option_type=OptionType.EXACT)))
    partial = _child(_rule("parent", _condition({"A"}, option_type=OptionType.EXACT)))

    assert is_rule_applicable(exact_match, [parent]) is True
    assert is_rule_applicable(partial, [parent]) is False


def test_exact_option_type_accepts_selection_inside_a_wider_option_list():
    parent = _multi("parent", ["A", "C"])
    wider = _child(_rule("parent", _condition({"A", "B", "C"}, option_type=OptionType.EXACT)))

    assert is_rule_applicable(wider, [parent]) is True


def test_single_option_type_requires_exactly_one_selected_answer():
    one_selected = _multi("parent", ["A"])
    two_selected = _multi("parent", ["A", "B"])
    condition = _condition({"A", "B"}, option_type=OptionType.SINGLE)

    assert evaluate_condition(condition, one_selected).result is True
    assert evaluate_condition(condition, two_selected).result is False
    assert evaluate_condition(_condition({"B"}, option_type=OptionType.SINGLE), one_selected).result is False


def test_default_option_type_matches_any_overlap():
    parent = _multi("parent", ["A", "B"])

    assert evaluate_condition(_condition({"B", "Z"}), parent).result is True
    assert evaluate_condition(_condition({"Z"}), parent).result is False


def test_unknown_option_type_label_falls_back_to_any_overlap():
    condition = Condition(parent_options=["B"], option_type="Multiple")
    assert condition.option_type is OptionType.ANY
    assert evaluate_condition(condition, _multi("parent", ["A", "B"])).result is True


def test_multi_choice_without_selection_is_not_negated():
    parent = _multi("parent", [])
    condition = _condition({"A"}, negate=True)
    outcome = evaluate_condition(condition, parent)

    assert outcome.no_selection is True
    assert is_rule_applicable(_child(_rule("parent", condition)), [parent]) is False


# -----------------------------
# Irregular input degrades to "not satisfied"
# -----------------------------

def test_missing_parent_question_fails_closed():
    child = _child(_rule("ghost", _condition({"A"})))
    assert is_rule_applicable(child, [child]) is False


def test_question_without_parent_rules_is_not_applicable_and_never_reset():
    standalone = _child(_rule(None, _condition({"A"})))

    assert is_rule_applicable(standalone, [standalone]) is False
    assert should_reset_question_answers(standalone, [standalone]) is False


def test_non_in_operators_contribute_nothing():
    parent = _single("parent", "A")
    child = _child(_rule("parent", _condition({"A"}, operator="LENGTH"), _condition({"A"}, operator="REGEX")))

    assert is_rule_applicable(child, [parent]) is False


def test_non_in_operator_is_ignored_beside_an_in_condition():
    parent = _single("parent", "A")
    child = _child(_rule("parent", _condition({"A"}), _condition({"B"}, operator="LENGTH")))

    assert is_rule_applicable(child, [parent]) is True


def test_free_text_parent_is_determinately_unsatisfied():
    parent = Question(question_id="parent", data_type=DataType.FREE_TEXT, answer_text="A")

    outcome = evaluate_condition(_condition({"A"}), parent)
    assert outcome == (False, False)
    # a determinate result is still subject to negation
    negated = _child(_rule("parent", _condition({"A"}, negate=True)))
    assert is_rule_applicable(negated, [parent]) is True


# -----------------------------
# Group combination
# -----------------------------

@pytest.mark.parametrize(
    "and_group, or_group, expected",
    [
        ([], [], False),
        ([False], [False], False),
        ([], [False], False),
        ([True], [], True),
        ([True], [False], True),
        ([True, False], [], False),
        ([True, False], [True], True),
        ([False], [True], True),
        ([], [True, False], True),
        ([False, False], [False, True], True),
    ],
)
def test_process_evaluations_precedence(and_group, or_group, expected):
    assert process_evaluations({Mode.AND: and_group, Mode.OR: or_group}) is expected


def test_bucket_order_does_not_change_verdict():
    and_group = [True, False, True]
    or_group = [False, True]
    verdicts = {
        process_evaluations({Mode.AND: list(a), Mode.OR: list(o)})
        for a in itertools.permutations(and_group)
        for o in itertools.permutations(or_group)
    }
    assert verdicts == {True}


def test_rule_modes_combine_independently_of_condition_modes():
    yes_no = _single("gate", "A")
    orgs = _multi("orgs", ["B"])

    # Condition level: OR conditions inside an AND rule
    either = _rule(
        "orgs",
        _condition({"A"}, mode=Mode.OR),
        _condition({"B"}, mode=Mode.OR),
        mode=Mode.AND,
        sequence=1,
    )
    gate = _rule("gate", _condition({"A"}), mode=Mode.AND, sequence=0)
    failing_gate = _rule("gate", _condition({"B"}), mode=Mode.AND, sequence=0)

    assert is_rule_applicable(_child(gate, either), [yes_no, orgs]) is True
    assert is_rule_applicable(_child(failing_gate, either), [yes_no, orgs]) is False


def test_or_rule_rescues_partially_failed_and_rules():
    gate = _single("gate", "A")
    rules = [
        _rule("gate", _condition({"A"}), mode=Mode.AND, sequence=2),
        _rule("gate", _condition({"B"}), mode=Mode.AND, sequence=1),
        _rule("gate", _condition({"A"}), mode=Mode.OR, sequence=0),
    ]
    for ordering in itertools.permutations(rules):
        assert is_rule_applicable(_child(*ordering), [gate]) is True


def test_lowercase_modes_are_accepted():
    rule = Rule(mode="or", parent_question_id="gate", conditions=[Condition(mode="or", parent_options=["A"])])
    assert rule.mode is Mode.OR
    assert rule.conditions[0].mode is Mode.OR


# -----------------------------
# Reset companion
# -----------------------------

@pytest.mark.parametrize("selected, expected_reset", [("A", False), ("B", True), (None, True)])
def test_should_reset_is_negation_of_applicability(selected, expected_reset):
    parent = _single("parent", selected)
    child = _child(_rule("parent", _condition({"A"})))

    assert should_reset_question_answers(child, [parent, child]) is expected_reset
    assert should_reset_question_answers(child, [parent, child]) is (not is_rule_applicable(child, [parent, child]))


def test_data_type_labels_map_to_closed_variants():
    assert DataType.from_cms("Boolean") is DataType.SINGLE_CHOICE
    assert DataType.from_cms("Radio button") is DataType.SINGLE_CHOICE
    assert DataType.from_cms("Checkbox") is DataType.MULTI_CHOICE
    assert DataType.from_cms("Date") is DataType.DATE
    assert DataType.from_cms("Email") is DataType.FREE_TEXT
    assert Question(question_id="q", data_type="Checkbox").data_type is DataType.MULTI_CHOICE
