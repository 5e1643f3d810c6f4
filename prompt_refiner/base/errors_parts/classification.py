"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction and status-to-code mapping for the HTTP
transports, plus the wrapping of arbitrary exceptions into
:class:`DispatchError` so nothing escapes the engine unclassified.
"""
from __future__ import annotations

import asyncio
import subprocess  # nosec B404 - only used for exception types
from typing import Dict, Optional, Tuple

import httpx

from .dispatch_error import DispatchError
from .error_code import ErrorCode


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


# status -> (code, retryable hint)
_HTTP_STATUS_MAP: Dict[int, Tuple[ErrorCode, bool]] = {
    400: (ErrorCode.TRANSPORT_FAILURE, False),
    401: (ErrorCode.AUTH, False),
    403: (ErrorCode.AUTH, False),
    404: (ErrorCode.TRANSPORT_FAILURE, False),
    408: (ErrorCode.TRANSPORT_TIMEOUT, True),
    422: (ErrorCode.TRANSPORT_FAILURE, False),
    429: (ErrorCode.TRANSPORT_FAILURE, True),
    500: (ErrorCode.TRANSPORT_FAILURE, True),
    502: (ErrorCode.TRANSPORT_FAILURE, True),
    503: (ErrorCode.TRANSPORT_FAILURE, True),
    504: (ErrorCode.TRANSPORT_TIMEOUT, True),
}


def classify_status(status: int) -> Tuple[ErrorCode, bool]:
    """Return ``(code, retryable)`` for an HTTP status code."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    return ErrorCode.TRANSPORT_FAILURE, status >= 500


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. DispatchError passthrough.
        2. Timeout exceptions (httpx, subprocess, builtin/async).
        3. HTTP status mapping.
        4. ``TRANSPORT_FAILURE`` fallback.
    """
    if isinstance(exc, DispatchError):
        return exc.code
    if isinstance(
        exc,
        (httpx.TimeoutException, subprocess.TimeoutExpired, TimeoutError, asyncio.TimeoutError),
    ):
        return ErrorCode.TRANSPORT_TIMEOUT
    status = _extract_status(exc)
    if status is not None:
        return classify_status(status)[0]
    return ErrorCode.TRANSPORT_FAILURE


def as_dispatch_error(
    exc: BaseException,
    *,
    provider: str,
    model: Optional[str] = None,
    raw_excerpt: Optional[str] = None,
) -> DispatchError:
    """Return ``exc`` unchanged when already a DispatchError, else wrap it."""
    if isinstance(exc, DispatchError):
        return exc
    status = _extract_status(exc)
    code = classify_exception(exc)
    retryable = classify_status(status)[1] if status is not None else code is ErrorCode.TRANSPORT_TIMEOUT
    details = {"status": status} if status is not None else {}
    return DispatchError(
        code=code,
        message=str(exc) or exc.__class__.__name__,
        provider=provider,
        model=model,
        retryable=retryable,
        raw_excerpt=raw_excerpt,
        details=details,
        raw=exc,
    )


__all__ = [
    "classify_exception",
    "classify_status",
    "as_dispatch_error",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
