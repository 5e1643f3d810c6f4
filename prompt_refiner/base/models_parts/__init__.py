"""Models parts package.

One cohesive group of DTOs per module; import from
``prompt_refiner.base.models`` for the stable surface.
"""

from .model_info import ModelInfo, dedupe_models, label_from_id
from .provider import Provider, TransportKind
from .clarification_item import ClarificationItem, ClarificationType
from .learning_report import CategoryScores, LearningReport, Weakness
from .structured_result import (
    Excellent,
    Improved,
    NeedsClarification,
    StructuredResult,
    StructuredResultWire,
    result_from_wire,
)
from .conversation_turn import Constraint, ConversationTurn, format_constraints
from .dispatch_types import DispatchOutcome, DispatchRequest, Outcome, TransportRequest
from .listing import Availability, ModelListing, RescanResult

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
