"""Unified dispatch error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``prompt_refiner.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.dispatch_error import DispatchError, RAW_EXCERPT_LIMIT, excerpt
from .errors_parts.classification import as_dispatch_error, classify_exception, classify_status

__all__ = [
    "ErrorCode",
    "DispatchError",
    "RAW_EXCERPT_LIMIT",
    "excerpt",
    "as_dispatch_error",
    "classify_exception",
    "classify_status",
]
