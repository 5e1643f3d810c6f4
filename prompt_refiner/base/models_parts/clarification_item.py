"""
ClarificationItem DTO.

One question the model needs answered before it can produce a refined prompt.
Items live only for the duration of a conversation and are never persisted.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ClarificationType = Literal[
    "single_select",
    "multi_select",
    "short_text",
    "long_text",
    "number",
    "boolean",
]


class ClarificationItem(BaseModel):
    """A single clarification question.

    Attributes:
        id: Stable snake_case identifier; answers are keyed by it.
        question: Plain language question.
        why_required: One or two sentences explaining the need.
        type: Answer widget type.
        options: Choices for the select types.
        default: Optional default answer.
        validation: Optional free-form validation hints.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1)
    question: str = Field(min_length=1)
    why_required: str = ""
    type: ClarificationType
    options: Optional[List[str]] = None
    default: Any = None
    validation: Optional[Dict[str, Any]] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


__all__ = ["ClarificationItem", "ClarificationType"]
