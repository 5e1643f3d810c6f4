"""prompt_refiner.config.env
=========================

Centralized environment variable mapping and helpers for provider credentials.

Purpose
-------
- Provide a single source of truth for mapping provider identifiers to their
  corresponding environment variable names (canonical and aliases).
- Offer small lookup helpers that work on an explicit ``env`` mapping (the
  one carried by :class:`~prompt_refiner.base.context.DispatchContext`)
  rather than reading ``os.environ`` at arbitrary depths.

Failure Modes
-------------
- Functions return ``None`` when a provider is unknown or no value is present;
  they never raise on missing providers or unset variables.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional, Tuple

# Canonical provider -> env var mapping
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "copilot": "GH_TOKEN",
}


# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "copilot": ("GH_TOKEN", "GITHUB_TOKEN"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider.

    The canonical name is yielded first, followed by any aliases.
    """
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def lookup_env(env: Mapping[str, str], name: Optional[str]) -> Optional[str]:
    """Return ``env[name]`` when it is set and non-blank, else ``None``."""
    if not name:
        return None
    value = env.get(name)
    if value is None or not str(value).strip():
        return None
    return value


def resolve_provider_key(provider: str, env: Mapping[str, str]) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from ``env``.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)``; ``(None, None)`` when nothing is set.
    """
    for name in get_env_var_candidates(provider):
        if val := lookup_env(env, name):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "lookup_env",
    "resolve_provider_key",
]
