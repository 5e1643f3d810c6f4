"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the implementations under
``prompt_refiner.base.models_parts`` so callers have one stable import path.
"""

from .models_parts.model_info import ModelInfo, dedupe_models, label_from_id
from .models_parts.provider import Provider, TransportKind
from .models_parts.clarification_item import ClarificationItem, ClarificationType
from .models_parts.learning_report import CategoryScores, LearningReport, Weakness
from .models_parts.structured_result import (
    Excellent,
    Improved,
    NeedsClarification,
    StructuredResult,
    StructuredResultWire,
    result_from_wire,
)
from .models_parts.conversation_turn import Constraint, ConversationTurn, format_constraints
from .models_parts.dispatch_types import DispatchOutcome, DispatchRequest, Outcome, TransportRequest
from .models_parts.listing import Availability, ModelListing, RescanResult

__all__ = [
    "ModelInfo",
    "dedupe_models",
    "label_from_id",
    "Provider",
    "TransportKind",
    "ClarificationItem",
    "ClarificationType",
    "CategoryScores",
    "LearningReport",
    "Weakness",
    "Excellent",
    "Improved",
    "NeedsClarification",
    "StructuredResult",
    "StructuredResultWire",
    "result_from_wire",
    "Constraint",
    "ConversationTurn",
    "format_constraints",
    "DispatchOutcome",
    "DispatchRequest",
    "Outcome",
    "TransportRequest",
    "Availability",
    "ModelListing",
    "RescanResult",
]
