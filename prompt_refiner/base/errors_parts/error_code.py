"""
Normalized dispatch error codes (taxonomy).

Defines the `ErrorCode` enumeration used by transports, the response coercer,
the dispatch engine and the clarification state machine. Values are lowercase
snake_case and are considered a stable public contract for logging and for
the HTTP service's error payloads.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    CREDENTIAL_MISSING = "credential_missing"
    AUTH = "auth"
    TRANSPORT_TIMEOUT = "transport_timeout"
    TRANSPORT_FAILURE = "transport_failure"
    MALFORMED_OUTPUT = "malformed_output"
    UNSUPPORTED_PROVIDER = "unsupported_provider"
    CLARIFICATION_LOOP_EXCEEDED = "clarification_loop_exceeded"
    VALIDATION = "validation"


__all__ = ["ErrorCode"]
