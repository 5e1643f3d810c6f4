"""Tests for result DTOs, the Outcome wrapper and conversation turn helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from prompt_refiner.base.errors import DispatchError, ErrorCode
from prompt_refiner.base.models import (
    ClarificationItem,
    Constraint,
    ConversationTurn,
    Excellent,
    Improved,
    LearningReport,
    NeedsClarification,
    Outcome,
    result_from_wire,
)
from prompt_refiner.base.schema import schema_errors


def _variants(clarify_wire, improved_wire, learning_report_wire):
    report = LearningReport.model_validate(learning_report_wire)
    return [
        NeedsClarification(
            clarifications=[ClarificationItem.model_validate(c) for c in clarify_wire["clarifications"]]
        ),
        Excellent(
            improved_prompt="Summarize the attached RFC in five bullet points.",
            excellence_reason="Scope, format and input are all explicit.",
            learning_report=report,
        ),
        Improved(improved_prompt=improved_wire["improved_prompt"], assumptions=["Python 3.11"], learning_report=report),
    ]


def test_each_shape_reencodes_to_an_equal_result(clarify_wire, improved_wire, learning_report_wire) -> None:
    for variant in _variants(clarify_wire, improved_wire, learning_report_wire):
        wire = variant.to_wire()
        assert schema_errors(wire) == []
        decoded = result_from_wire(wire)
        assert type(decoded) is type(variant)
        assert decoded.model_dump() == variant.model_dump()


def test_wire_flags_follow_the_shape(clarify_wire, improved_wire, learning_report_wire) -> None:
    clar, excellent, improved = (v.to_wire() for v in _variants(clarify_wire, improved_wire, learning_report_wire))
    assert clar["needs_clarification"] is True and clar["improved_prompt"] is None
    assert excellent["is_already_excellent"] is True and excellent["clarifications"] == []
    assert improved["needs_clarification"] is False and improved["is_already_excellent"] is False


def test_needs_clarification_requires_items() -> None:
    with pytest.raises(ValidationError):
        NeedsClarification(clarifications=[])


def test_learning_report_scores_are_bounded(learning_report_wire) -> None:
    bad = dict(learning_report_wire, overall_score=140)
    with pytest.raises(ValidationError):
        LearningReport.model_validate(bad)


def test_learning_report_caps_weaknesses(learning_report_wire) -> None:
    weakness = learning_report_wire["top_weaknesses"][0]
    bad = dict(learning_report_wire, top_weaknesses=[weakness] * 4)
    with pytest.raises(ValidationError):
        LearningReport.model_validate(bad)


def test_outcome_holds_exactly_one_side() -> None:
    err = DispatchError(code=ErrorCode.AUTH, message="bad key", provider="openai")
    ok = Outcome.success(Improved(improved_prompt="x"))
    failed = Outcome.failure(err)

    assert ok.ok and not failed.ok
    assert ok.unwrap().improved_prompt == "x"
    with pytest.raises(DispatchError):
        failed.unwrap()
    with pytest.raises(ValueError):
        Outcome()
    with pytest.raises(ValueError):
        Outcome(value=Improved(improved_prompt="x"), error=err)


def test_outcome_to_dict() -> None:
    err = DispatchError(code=ErrorCode.TRANSPORT_TIMEOUT, message="slow", provider="claude", retryable=True)
    assert Outcome.failure(err).to_dict() == {
        "ok": False,
        "error": {
            "code": "transport_timeout",
            "error": "slow",
            "provider": "claude",
            "model": None,
            "retryable": True,
        },
    }
    payload = Outcome.success(Improved(improved_prompt="y")).to_dict()
    assert payload["ok"] is True
    assert payload["result"]["improved_prompt"] == "y"


def test_constraints_render_with_type_labels() -> None:
    turn = ConversationTurn(
        rough_prompt="fix the bug",
        constraints=(
            Constraint("output-format", "a unified diff"),
            Constraint("tone", "concise"),
        ),
    )
    assert turn.constraints_text == "Output Format: a unified diff; Tone: concise"


def test_with_answers_returns_a_copy() -> None:
    turn = ConversationTurn(rough_prompt="fix the bug")
    answered = turn.with_answers({"language": "Python"})
    assert answered.prior_clarification_answers == {"language": "Python"}
    assert turn.prior_clarification_answers is None
