"""Unified timeout values for transports.

This module centralizes timeout values used across the transport adapters
(HTTP generation calls, CLI invocations, model-list fetches and CLI model
probes). Call sites never hard-code durations; they read them from a
:class:`TimeoutConfig` carried by the dispatch context.

Key Components
--------------
TimeoutConfig
    Frozen dataclass of normalized timeout values in seconds.

get_timeout_config(env)
    Builds a configuration from an explicit environment mapping. Supported
    variables (all optional, positive floats):
        PR_TIMEOUT_HTTP_SECONDS
        PR_TIMEOUT_CLI_SECONDS
        PR_TIMEOUT_MODEL_LIST_SECONDS
        PR_TIMEOUT_MODEL_PROBE_SECONDS

Failure Modes
-------------
Unparseable or non-positive values fall back to the defaults silently.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping, Optional


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Single generation request against an HTTP API.
        cli_timeout_seconds: Wall-clock cap for one CLI tool invocation.
        model_list_timeout_seconds: HTTP model-list fetch.
        model_probe_timeout_seconds: CLI model-list probe (help output or
            deliberately invalid model id).
    """

    http_timeout_seconds: float = 120.0
    cli_timeout_seconds: float = 180.0
    model_list_timeout_seconds: float = 10.0
    model_probe_timeout_seconds: float = 10.0


def _parse_env_float(env: Mapping[str, str], name: str, default: float) -> float:
    """Parse ``env[name]`` as a positive float, else return ``default``."""
    raw = env.get(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:
        return default


def get_timeout_config(env: Optional[Mapping[str, str]] = None) -> TimeoutConfig:
    """Return a `TimeoutConfig` honoring ``PR_TIMEOUT_*`` overrides in ``env``."""
    env = os.environ if env is None else env
    d = TimeoutConfig()
    return TimeoutConfig(
        http_timeout_seconds=_parse_env_float(env, "PR_TIMEOUT_HTTP_SECONDS", d.http_timeout_seconds),
        cli_timeout_seconds=_parse_env_float(env, "PR_TIMEOUT_CLI_SECONDS", d.cli_timeout_seconds),
        model_list_timeout_seconds=_parse_env_float(
            env, "PR_TIMEOUT_MODEL_LIST_SECONDS", d.model_list_timeout_seconds
        ),
        model_probe_timeout_seconds=_parse_env_float(
            env, "PR_TIMEOUT_MODEL_PROBE_SECONDS", d.model_probe_timeout_seconds
        ),
    )


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
