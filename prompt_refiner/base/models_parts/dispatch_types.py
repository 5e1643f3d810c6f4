"""
Request and outcome types at the transport and engine boundaries.

``TransportRequest`` is the only thing a transport sees: it carries no
provider-specific option names. ``DispatchRequest`` is the engine's input and
``DispatchOutcome`` its Result-style output.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from ..errors import DispatchError
from .structured_result import Excellent, Improved, NeedsClarification

T = TypeVar("T")


@dataclass(frozen=True)
class TransportRequest:
    """Uniform input to :meth:`Transport.invoke`.

    Attributes:
        system_instructions: Full system prompt including prompt type guidance.
        user_content: Rendered ``Input:`` block.
        model_id: Model to use; empty for the tool's default.
        credential: Resolved secret for HTTP transports.
        working_directory: Directory CLI tools run in.
        timeout_ms: Wall-clock limit for the call.
    """

    system_instructions: str
    user_content: str
    model_id: str
    credential: Optional[str] = None
    working_directory: Optional[Path] = None
    timeout_ms: Optional[int] = None

    @property
    def timeout_seconds(self) -> Optional[float]:
        return self.timeout_ms / 1000.0 if self.timeout_ms is not None else None


@dataclass(frozen=True)
class DispatchRequest:
    """Input to :meth:`DispatchEngine.dispatch`."""

    provider_id: str
    model_id: str
    rough_prompt: str
    constraints: str = ""
    learning_mode: bool = False
    clarification_answers: Optional[Dict[str, Any]] = None
    extra_system_guidance: str = ""
    credential: Optional[str] = None
    conversation_id: Optional[str] = None


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result-style value holding exactly one of ``value`` or ``error``."""

    value: Optional[T] = None
    error: Optional[DispatchError] = None

    def __post_init__(self) -> None:
        if (self.value is None) == (self.error is None):
            raise ValueError("Outcome requires exactly one of value or error")

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DispatchError) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried :class:`DispatchError`."""
        if self.error is not None:
            raise self.error
        assert self.value is not None  # nosec B101
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        if self.error is not None:
            return {"ok": False, "error": self.error.to_dict()}
        to_wire = getattr(self.value, "to_wire", None)
        return {"ok": True, "result": to_wire() if callable(to_wire) else self.value}


DispatchOutcome = Outcome[Union[NeedsClarification, Excellent, Improved]]


__all__ = [
    "TransportRequest",
    "DispatchRequest",
    "Outcome",
    "DispatchOutcome",
]
