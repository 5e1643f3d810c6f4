"""
Dispatch base package.

Provider-agnostic building blocks shared by every transport:

- Errors: normalized :class:`ErrorCode` taxonomy and :class:`DispatchError`
- Models (DTOs): results, requests, listings and catalog entries
- Context: explicit environment, home directory and timeouts
- Transports: HTTP and CLI base classes plus the :class:`Transport` protocol
- Factory and registry: catalog lookup and lazy transport creation
"""

from .context import DispatchContext
from .errors import DispatchError, ErrorCode
from .factory import TransportFactory
from .interfaces import Transport
from .models import (
    Availability,
    ClarificationItem,
    ConversationTurn,
    DispatchOutcome,
    DispatchRequest,
    Excellent,
    Improved,
    ModelInfo,
    ModelListing,
    NeedsClarification,
    Provider,
    TransportKind,
    TransportRequest,
)
from .model_cache import ModelCache
from .registry import ProviderRegistry
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "DispatchContext",
    "DispatchError",
    "ErrorCode",
    "TransportFactory",
    "Transport",
    "Availability",
    "ClarificationItem",
    "ConversationTurn",
    "DispatchOutcome",
    "DispatchRequest",
    "Excellent",
    "Improved",
    "ModelInfo",
    "ModelListing",
    "NeedsClarification",
    "Provider",
    "TransportKind",
    "TransportRequest",
    "ModelCache",
    "ProviderRegistry",
    "TimeoutConfig",
    "get_timeout_config",
]
