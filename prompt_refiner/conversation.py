"""Clarification state machine for one conversation.

States::

    START --submit--> AWAITING_CLARIFICATION --answer--> AWAITING_CLARIFICATION
                 \\                         \\
                  +--> TERMINAL              +--> TERMINAL
                  +--> FAILED                +--> FAILED

``submit`` dispatches a turn once. A ``NeedsClarification`` result parks the
session with the pending questions; ``answer`` merges the caller's answers
and re-dispatches the same turn carrying every answer given so far. Answer
round-trips that keep coming back as ``NeedsClarification`` are capped; at the
cap the session fails with ``CLARIFICATION_LOOP_EXCEEDED``.

A session is sequential: one dispatch at a time, driven by its owner.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
import uuid

from .base.errors import DispatchError, ErrorCode
from .base.logging import LogContext, get_logger, log_event
from .base.models import (
    ClarificationItem,
    ConversationTurn,
    DispatchOutcome,
    DispatchRequest,
    NeedsClarification,
    Outcome,
)
from .config.defaults import CLARIFICATION_MAX_ROUNDS
from .dispatch import DispatchEngine
from .prompt_types import guidance_for

_logger = get_logger("conversation")


class SessionState(str, Enum):
    START = "start"
    AWAITING_CLARIFICATION = "awaiting_clarification"
    TERMINAL = "terminal"
    FAILED = "failed"


class InvalidTransition(RuntimeError):
    """Raised when an operation is not allowed in the current state."""


class ClarificationSession:
    """Drives submit/answer round-trips for one conversation.

    Parameters
    ----------
    engine:
        Dispatch engine used for every round.
    max_rounds:
        Answer round-trips allowed to still return ``NeedsClarification``.
    custom_prompt_types:
        Extra prompt types (id -> ``{name, system_prompt}``) for guidance.
    conversation_id:
        Log correlation id; generated when omitted.
    """

    def __init__(
        self,
        engine: DispatchEngine,
        *,
        max_rounds: int = CLARIFICATION_MAX_ROUNDS,
        custom_prompt_types: Optional[Mapping[str, Mapping[str, Any]]] = None,
        conversation_id: Optional[str] = None,
    ) -> None:
        if max_rounds < 1:
            raise ValueError("max_rounds must be >= 1")
        self.engine = engine
        self.max_rounds = max_rounds
        self.custom_prompt_types = custom_prompt_types
        self.conversation_id = conversation_id or uuid.uuid4().hex
        self.state = SessionState.START
        self.rounds = 0
        self.pending: List[ClarificationItem] = []
        self.answers: Dict[str, Any] = {}
        self.last_outcome: Optional[DispatchOutcome] = None
        self._turn: Optional[ConversationTurn] = None
        self._provider_id = ""
        self._model_id = ""
        self._credential: Optional[str] = None
        # an empty answer set still tells the model the answers are final
        self._answered = False

    # ---- internals ---------------------------------------------------------

    def _dispatch(self) -> DispatchOutcome:
        assert self._turn is not None  # nosec B101
        turn = self._turn
        request = DispatchRequest(
            provider_id=self._provider_id,
            model_id=self._model_id,
            rough_prompt=turn.rough_prompt,
            constraints=turn.constraints_text,
            learning_mode=turn.learning_mode,
            clarification_answers=dict(self.answers) if self._answered else None,
            extra_system_guidance=guidance_for(turn.prompt_type, self.custom_prompt_types),
            credential=self._credential,
            conversation_id=self.conversation_id,
        )
        return self.engine.dispatch(request)

    def _settle(self, outcome: DispatchOutcome, *, answering: bool) -> DispatchOutcome:
        if not outcome.ok:
            self._finish(SessionState.FAILED)
            self.last_outcome = outcome
            return outcome

        result = outcome.value
        if isinstance(result, NeedsClarification):
            if answering and self.rounds >= self.max_rounds:
                err = DispatchError(
                    code=ErrorCode.CLARIFICATION_LOOP_EXCEEDED,
                    message=f"Model still needs clarification after {self.rounds} answer rounds.",
                    provider=self._provider_id,
                    model=self._model_id,
                    details={"rounds": self.rounds, "max_rounds": self.max_rounds},
                )
                log_event(
                    _logger,
                    "conversation.loop_exceeded",
                    self._log_ctx(),
                    rounds=self.rounds,
                )
                self._finish(SessionState.FAILED)
                failed: DispatchOutcome = Outcome.failure(err)
                self.last_outcome = failed
                return failed
            self.pending = list(result.clarifications)
            self.state = SessionState.AWAITING_CLARIFICATION
        else:
            self._finish(SessionState.TERMINAL)
        self.last_outcome = outcome
        return outcome

    def _finish(self, state: SessionState) -> None:
        self.state = state
        self.pending = []
        self._turn = None
        self._credential = None

    def _log_ctx(self) -> LogContext:
        return LogContext(provider=self._provider_id, model=self._model_id, conversation_id=self.conversation_id)

    # ---- public API --------------------------------------------------------

    def submit(
        self,
        turn: ConversationTurn,
        provider_id: str,
        model_id: str,
        credential: Optional[str] = None,
    ) -> DispatchOutcome:
        """Dispatch a new turn.

        Allowed from ``START`` and after a finished round (``TERMINAL`` or
        ``FAILED``), which starts over. Raises :class:`InvalidTransition`
        while questions are pending.
        """
        if self.state is SessionState.AWAITING_CLARIFICATION:
            raise InvalidTransition("answer the pending clarifications before submitting a new turn")
        self._turn = turn
        self._provider_id = provider_id
        self._model_id = model_id
        self._credential = credential
        self.rounds = 0
        self.answers = dict(turn.prior_clarification_answers or {})
        self._answered = turn.prior_clarification_answers is not None
        self.pending = []
        log_event(_logger, "conversation.submit", self._log_ctx(), prompt_type=turn.prompt_type)
        return self._settle(self._dispatch(), answering=False)

    def answer(self, answers: Mapping[str, Any]) -> DispatchOutcome:
        """Merge ``answers`` and re-dispatch; valid only while awaiting."""
        if self.state is not SessionState.AWAITING_CLARIFICATION or self._turn is None:
            raise InvalidTransition(f"cannot answer in state '{self.state.value}'")
        self.answers.update(answers)
        self._answered = True
        self._turn = self._turn.with_answers(self.answers)
        self.rounds += 1
        log_event(_logger, "conversation.answer", self._log_ctx(), round=self.rounds, answered=sorted(answers))
        return self._settle(self._dispatch(), answering=True)


__all__ = ["SessionState", "InvalidTransition", "ClarificationSession"]
