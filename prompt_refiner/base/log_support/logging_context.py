"""Structured logging context object for dispatch events.

This module defines :class:`LogContext`, a dataclass carrying the common
fields of a dispatch log event (provider id, model id, transport kind and a
conversation id when the clarification state machine is driving the call).
``to_dict`` merges the ``extra`` mapping and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for dispatch logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    transport: Optional[str] = None
    conversation_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
