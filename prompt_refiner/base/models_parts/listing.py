"""
Catalog-facing result DTOs: availability, model listings and rescan results.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .model_info import ModelInfo


@dataclass(frozen=True)
class Availability:
    """Whether a provider can be used right now, and why not if it cannot."""

    available: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"available": self.available, "reason": self.reason}


@dataclass(frozen=True)
class ModelListing:
    """Models offered by one provider.

    Attributes:
        provider: Provider id.
        models: Models after the allow-list filter.
        is_dynamic: ``True`` when the list came from live discovery (or the
            cache of one), ``False`` for fallback or configured lists.
        note: Human-readable provenance or failure reason.
    """

    provider: str
    models: Tuple[ModelInfo, ...] = field(default_factory=tuple)
    is_dynamic: bool = False
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "provider": self.provider,
            "models": [m.to_dict() for m in self.models],
            "is_dynamic": self.is_dynamic,
            "note": self.note,
        }


@dataclass(frozen=True)
class RescanResult:
    """Outcome of re-fetching one provider's model list."""

    success: bool
    count: Optional[int] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.success:
            return {"success": True, "count": self.count}
        return {"success": False, "reason": self.reason}


__all__ = ["Availability", "ModelListing", "RescanResult"]
