"""
Structured dispatch error exception type.

Wraps transport, parsing and state-machine failures with a normalized
`ErrorCode` so callers can branch on the taxonomy instead of on exception
classes or message text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .error_code import ErrorCode

RAW_EXCERPT_LIMIT = 1000


def excerpt(text: Optional[str], limit: int = RAW_EXCERPT_LIMIT) -> Optional[str]:
    """Return at most ``limit`` characters of ``text`` for diagnostics."""
    if text is None:
        return None
    return text if len(text) <= limit else text[:limit]


@dataclass
class DispatchError(Exception):
    """Represents a structured dispatch failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging and display.
        provider: Provider id where the error originated (e.g. ``"openai"``).
        model: Optional model id associated with the failure.
        retryable: Hint for the caller's own retry decision. The engine never
            retries by itself.
        raw_excerpt: Bounded excerpt of the raw provider output, when any.
        details: Extra JSON-friendly diagnostics (HTTP status, pid, exit code).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw_excerpt: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    raw: Optional[BaseException] = None

    def __post_init__(self) -> None:
        self.raw_excerpt = excerpt(self.raw_excerpt)

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-friendly payload surfaced to API callers."""
        payload: Dict[str, Any] = {
            "code": self.code.value,
            "error": self.message,
            "provider": self.provider,
            "model": self.model,
            "retryable": self.retryable,
        }
        if self.raw_excerpt is not None:
            payload["raw"] = self.raw_excerpt
        if self.details:
            payload["details"] = dict(self.details)
        return payload


__all__ = ["DispatchError", "RAW_EXCERPT_LIMIT", "excerpt"]
