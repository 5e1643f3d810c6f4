"""
Provider catalog entry and transport kind.

A :class:`Provider` describes how to reach one backend: which transport it
speaks, how its credential is detected, and the static model list used when
dynamic discovery is unavailable. Built-in entries are immutable; custom
entries are produced from persisted records.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from .model_info import ModelInfo

if TYPE_CHECKING:  # pragma: no cover
    from ..credentials import CredentialRule


class TransportKind(str, Enum):
    """How a provider is invoked."""

    HTTP = "http"
    CLI = "cli"


@dataclass(frozen=True)
class Provider:
    """A provider catalog entry.

    Attributes:
        id: Unique lowercase identifier.
        display_name: Human-friendly name.
        transport_kind: ``HTTP`` or ``CLI``.
        supports_dynamic_models: Whether live model discovery is attempted.
        credential_rule: Rule deciding availability.
        base_url: API base for HTTP providers.
        static_models: Fallback or configured model list.
        builtin: ``True`` for the bundled catalog entries.
        json_mode: Request JSON response mode (custom OpenAI-compatible only).
    """

    id: str
    display_name: str
    transport_kind: TransportKind
    supports_dynamic_models: bool
    credential_rule: "CredentialRule"
    base_url: Optional[str] = None
    static_models: Tuple[ModelInfo, ...] = field(default_factory=tuple)
    builtin: bool = True
    json_mode: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "transport": self.transport_kind.value,
            "supports_dynamic_models": self.supports_dynamic_models,
            "builtin": self.builtin,
            "base_url": self.base_url,
        }


__all__ = ["TransportKind", "Provider"]
