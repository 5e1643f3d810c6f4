"""Unified configuration layer for providers.

Goals
-----
* Centralize defaults (models, base URLs).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by PROMPT_REFINER_CONFIG_FILE
    3. Environment variables (e.g. OPENAI_MODEL, OPENAI_BASE_URL)
    4. In-code overrides passed to helper
* Provide a single call site: ``get_provider_config(provider, env=...)``.

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_API_KEY, <PROVIDER>_BASE_URL
e.g. OPENAI_MODEL, GEMINI_BASE_URL.

All lookups read from an explicit ``env`` mapping. ``load_env`` builds that
mapping from ``os.environ`` plus an optional ``.env`` file without mutating
the process environment.

External Config File (Optional)
-------------------------------
If PROMPT_REFINER_CONFIG_FILE is set to a path, JSON is attempted first and
YAML second. Structure example:

```
openai:
  model: gpt-4o-mini
gemini:
  base_url: https://generativelanguage.googleapis.com/v1beta
```

Public API
----------
* load_env(environ=None) -> dict
* get_provider_config(provider, env=None, overrides=None) -> dict
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .defaults import (
    GEMINI_DEFAULT_BASE_URL,
    GEMINI_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
)
from .env import is_placeholder, resolve_provider_key

CONFIG_FILE_ENV = "PROMPT_REFINER_CONFIG_FILE"
DOTENV_FILE_ENV = "DOTENV_FILE"


# -------------------- Defaults --------------------

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "gemini": {"model": GEMINI_DEFAULT_MODEL, "base_url": GEMINI_DEFAULT_BASE_URL},
    "copilot": {},
    "claude": {},
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
}


def _read_dotenv(path: str) -> Dict[str, str]:
    """Parse KEY=VALUE lines, ignoring comments and blank lines."""
    out: Dict[str, str] = {}
    if not os.path.isfile(path):
        return out
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            if k:
                out[k] = v
    return out


def load_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Return a snapshot of the environment merged with an optional ``.env`` file.

    Values from the file only fill variables that are unset or hold a
    placeholder value. ``os.environ`` itself is never modified.
    """
    env = dict(os.environ if environ is None else environ)
    path = env.get(DOTENV_FILE_ENV, ".env")
    for k, v in _read_dotenv(path).items():
        if k not in env or is_placeholder(env.get(k)):
            env[k] = v
    return env


def _load_external_config(env: Mapping[str, str]) -> Dict[str, Any]:
    path = env.get(CONFIG_FILE_ENV)
    if not path:
        return {}
    p = Path(path)
    if not p.exists():
        return {}
    text = p.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    return data if isinstance(data, dict) else {}


def _env_overrides(provider: str, env: Mapping[str, str]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper().replace("-", "_")
    for field, suffix in ENV_FIELD_MAP.items():
        val = env.get(f"{prefix}_{suffix}")
        if val is not None and val.strip():
            out[field] = val
    return out


def get_provider_config(
    provider: str,
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    When no ``api_key`` was configured, the provider's canonical key variable
    (and its aliases) is consulted.
    """
    env = load_env() if env is None else env
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    # 1. Defaults
    cfg |= DEFAULTS.get(name, {})

    # 2. External config file section
    file_cfg = _load_external_config(env).get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    # 3. Env overrides
    cfg |= _env_overrides(name, env)

    if not cfg.get("api_key"):
        key, _ = resolve_provider_key(name, env)
        if key:
            cfg["api_key"] = key

    # 4. Explicit overrides arg
    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "load_env",
    "get_provider_config",
]
