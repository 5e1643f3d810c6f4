"""
ModelInfo DTO for provider model listings.

Represents a single model entry as returned by a provider's model listing API,
a CLI probe, a bundled fallback list or a persisted custom provider record.
Entries are frozen so cached listings can be shared between readers.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Mapping, Optional


@dataclass(frozen=True)
class ModelInfo:
    """A single model listing entry.

    Attributes:
        id: Stable model identifier; the identity of the entry.
        label: Human-friendly display name.
        description: Optional short description.
        context_window: Optional maximum context window size.
    """

    id: str
    label: str
    description: Optional[str] = None
    context_window: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary, omitting unset optionals."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ModelInfo":
        """Build from a ``{"id", "label"?, "description"?}`` mapping."""
        model_id = str(data["id"])
        return cls(
            id=model_id,
            label=str(data.get("label") or data.get("name") or model_id),
            description=data.get("description"),
            context_window=data.get("context_window"),
        )


def label_from_id(model_id: str) -> str:
    """Derive a display label from a model id (``gpt-5-mini`` -> ``Gpt 5 Mini``)."""
    return " ".join(part[:1].upper() + part[1:] for part in model_id.split("-") if part)


def dedupe_models(models: Iterable[ModelInfo]) -> List[ModelInfo]:
    """Collapse duplicate ids, keeping the first occurrence and the order."""
    seen: set[str] = set()
    out: List[ModelInfo] = []
    for m in models:
        if m.id in seen:
            continue
        seen.add(m.id)
        out.append(m)
    return out


__all__ = [
    "ModelInfo",
    "label_from_id",
    "dedupe_models",
]
