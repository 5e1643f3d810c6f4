"""ClarificationSession state machine."""

from __future__ import annotations

import json

import pytest

from prompt_refiner.base.errors import DispatchError, ErrorCode
from prompt_refiner.base.models import Constraint, ConversationTurn, Improved, NeedsClarification
from prompt_refiner.base.registry import ProviderRegistry
from prompt_refiner.conversation import ClarificationSession, InvalidTransition, SessionState
from prompt_refiner.dispatch import DispatchEngine


@pytest.fixture()
def session_with(ctx, fake_transport_cls, resolver_for):
    """Build a session whose openai transport replays ``replies``."""

    def _make(*replies, **kwargs):
        registry = ProviderRegistry()
        fake = fake_transport_cls(registry.get("openai"), replies=list(replies))
        engine = DispatchEngine(registry, ctx, transport_resolver=resolver_for(openai=fake))
        return ClarificationSession(engine, **kwargs), fake

    return _make


def _inputs(fake, index: int) -> dict:
    return json.loads(fake.requests[index].user_content[len("Input:\n"):])


def test_clarify_then_improve(session_with, clarify_wire, improved_wire) -> None:
    session, fake = session_with(json.dumps(clarify_wire), json.dumps(improved_wire))
    turn = ConversationTurn(
        rough_prompt="fix the bug",
        constraints=(Constraint("tone", "formal"),),
        prompt_type="bug-investigation-fix",
    )

    first = session.submit(turn, "openai", "gpt-4o")
    assert isinstance(first.value, NeedsClarification)
    assert session.state is SessionState.AWAITING_CLARIFICATION
    assert [item.id for item in session.pending] == ["bug_location", "language"]
    assert _inputs(fake, 0)["clarifications"] is None

    second = session.answer({"bug_location": "parser.py", "language": "Python"})
    assert isinstance(second.value, Improved)
    assert session.state is SessionState.TERMINAL
    assert session.pending == []
    assert session.rounds == 1

    resent = _inputs(fake, 1)
    assert resent["rough_prompt"] == "fix the bug"
    assert resent["constraints"] == "Tone: formal"
    assert resent["clarifications"] == {"bug_location": "parser.py", "language": "Python"}
    assert "Prompt Type Guidance (Bug Investigation & Fix)" in fake.requests[1].system_instructions


def test_answers_accumulate_across_rounds(session_with, clarify_wire, improved_wire) -> None:
    session, fake = session_with(json.dumps(clarify_wire), json.dumps(clarify_wire), json.dumps(improved_wire))
    session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    session.answer({"bug_location": "parser.py"})
    session.answer({"language": "Python"})

    assert _inputs(fake, 2)["clarifications"] == {"bug_location": "parser.py", "language": "Python"}
    assert session.state is SessionState.TERMINAL


def test_prior_answers_seed_the_session(session_with, improved_wire) -> None:
    session, fake = session_with(json.dumps(improved_wire))
    session.submit(
        ConversationTurn("fix the bug", prior_clarification_answers={"language": "Go"}), "openai", "gpt-4o"
    )
    assert _inputs(fake, 0)["clarifications"] == {"language": "Go"}


def test_clarification_loop_is_capped(session_with, clarify_wire) -> None:
    session, fake = session_with(*[json.dumps(clarify_wire)] * 4, max_rounds=3)
    session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    session.answer({"a": 1})
    session.answer({"b": 2})
    outcome = session.answer({"c": 3})

    assert not outcome.ok
    assert outcome.error.code is ErrorCode.CLARIFICATION_LOOP_EXCEEDED
    assert outcome.error.details == {"rounds": 3, "max_rounds": 3}
    assert session.state is SessionState.FAILED
    assert len(fake.requests) == 4


def test_answer_requires_pending_questions(session_with, improved_wire) -> None:
    session, _ = session_with(json.dumps(improved_wire))
    with pytest.raises(InvalidTransition):
        session.answer({"x": 1})
    session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    with pytest.raises(InvalidTransition):
        session.answer({"x": 1})


def test_submit_blocked_while_awaiting(session_with, clarify_wire) -> None:
    session, _ = session_with(json.dumps(clarify_wire))
    session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    with pytest.raises(InvalidTransition):
        session.submit(ConversationTurn("something else"), "openai", "gpt-4o")


def test_dispatch_error_fails_session_and_allows_restart(session_with, improved_wire) -> None:
    auth = DispatchError(code=ErrorCode.AUTH, message="denied", provider="openai")
    session, _ = session_with(auth, json.dumps(improved_wire))

    failed = session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    assert failed.error is auth
    assert session.state is SessionState.FAILED
    assert session.last_outcome is failed

    retried = session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    assert retried.ok
    assert session.state is SessionState.TERMINAL


def test_max_rounds_must_be_positive(session_with) -> None:
    with pytest.raises(ValueError):
        session_with(max_rounds=0)


def test_empty_answers_are_sent_as_final(session_with, clarify_wire, improved_wire) -> None:
    session, fake = session_with(json.dumps(clarify_wire), json.dumps(improved_wire))
    session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    outcome = session.answer({})

    assert _inputs(fake, 0)["clarifications"] is None
    assert _inputs(fake, 1)["clarifications"] == {}
    assert isinstance(outcome.value, Improved)


def test_default_cap_stops_an_uncooperative_model(session_with, clarify_wire) -> None:
    session, fake = session_with(*[json.dumps(clarify_wire)] * 6)
    session.submit(ConversationTurn("fix the bug"), "openai", "gpt-4o")
    for _ in range(4):
        assert session.answer({}).ok
        assert session.state is SessionState.AWAITING_CLARIFICATION

    outcome = session.answer({})

    assert outcome.error.code is ErrorCode.CLARIFICATION_LOOP_EXCEEDED
    assert outcome.error.details == {"rounds": 5, "max_rounds": 5}
    assert session.state is SessionState.FAILED
    assert len(fake.requests) == 6
