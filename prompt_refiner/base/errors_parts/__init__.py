"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `prompt_refiner.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .dispatch_error import DispatchError, RAW_EXCERPT_LIMIT, excerpt
from .classification import as_dispatch_error, classify_exception, classify_status

__all__ = [
    "ErrorCode",
    "DispatchError",
    "RAW_EXCERPT_LIMIT",
    "excerpt",
    "as_dispatch_error",
    "classify_exception",
    "classify_status",
]
