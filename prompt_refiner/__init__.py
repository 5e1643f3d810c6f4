"""prompt_refiner package

Provider dispatch engine for a prompt-refinement assistant.

Purpose:
    Send a rough prompt (plus constraints, learning mode and clarification
    answers) to one of several model providers, reached over HTTPS or through
    a locally installed CLI tool, and return a validated structured result:
    clarification questions, an improved prompt, or an "already excellent"
    verdict.

Public API (re-exported):
    - Version: ``__version__``
    - Errors: :class:`DispatchError`, :class:`ErrorCode`
    - Engine: :class:`DispatchEngine`
    - Catalog: :class:`ModelCatalog`
    - Conversation: :class:`ClarificationSession`
    - Context: :class:`DispatchContext`
"""

from .base.context import DispatchContext
from .base.errors import DispatchError, ErrorCode
from .base.registry import ProviderRegistry
from .catalog import ModelCatalog
from .conversation import ClarificationSession, InvalidTransition, SessionState
from .dispatch import DispatchEngine

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "DispatchContext",
    "DispatchError",
    "ErrorCode",
    "ProviderRegistry",
    "ModelCatalog",
    "ClarificationSession",
    "InvalidTransition",
    "SessionState",
    "DispatchEngine",
]
