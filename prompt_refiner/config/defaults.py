"""prompt_refiner.config.defaults
=============================

Central place for small, stable default values used across the package and
the thin service layer. These defaults can be overridden via environment
variables or an external configuration file, but provide sensible fallbacks
for local development and tests.

This module intentionally avoids importing from other package modules to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

# ---- Service / HTTP layer ----

# Comma-separated list of allowed origins for the dev server.
PROMPT_REFINER_SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


# ---- Dispatch ----

# Fixed low temperature sent with every HTTP generation request.
DISPATCH_TEMPERATURE = 0.2
# Hard cap on clarification round-trips before the conversation fails closed.
CLARIFICATION_MAX_ROUNDS = 5


# ---- Model cache ----

MODEL_CACHE_TTL_SECONDS = 24 * 60 * 60
# OpenAI-compatible model listings are truncated to this many entries.
MODEL_LIST_MAX_ENTRIES = 1000
# Listing responses advertising a larger body are refused.
MODEL_LIST_MAX_BYTES = 5 * 1024 * 1024


# ---- Provider-specific defaults ----

OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"

GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_DEFAULT_MODEL = "gemini-2.0-flash"

COPILOT_EXECUTABLE = "copilot"
# Deliberately invalid model id; the CLI answers with the list of valid ones.
COPILOT_PROBE_MODEL = "invalid-model-to-list-choices"

CLAUDE_EXECUTABLE = "claude"


# ---- Local storage (persisted provider records) ----

STORAGE_DIR_ENV = "PROVIDERS_STORAGE_DIR"
STORAGE_DEFAULT_DIRNAME = ".prompt-assistant"
STORAGE_FILENAME = "providers.json"


# ---- Static fallback model lists ----

FALLBACK_MODELS: Mapping[str, List[Dict[str, str]]] = {
    "openai": [
        {"id": "gpt-4o", "label": "GPT-4o"},
        {"id": "gpt-4o-mini", "label": "GPT-4o Mini"},
        {"id": "gpt-4-turbo", "label": "GPT-4 Turbo"},
        {"id": "gpt-4", "label": "GPT-4"},
        {"id": "gpt-3.5-turbo", "label": "GPT-3.5 Turbo"},
        {"id": "o1", "label": "O1"},
        {"id": "o1-mini", "label": "O1 Mini"},
        {"id": "o1-preview", "label": "O1 Preview"},
    ],
    "gemini": [
        {"id": "gemini-2.0-flash", "label": "Gemini 2.0 Flash"},
        {"id": "gemini-1.5-pro", "label": "Gemini 1.5 Pro"},
        {"id": "gemini-1.5-flash", "label": "Gemini 1.5 Flash"},
        {"id": "gemini-1.0-pro", "label": "Gemini 1.0 Pro"},
    ],
    "copilot": [
        {"id": "claude-sonnet-4.5", "label": "Claude Sonnet 4.5"},
        {"id": "claude-haiku-4.5", "label": "Claude Haiku 4.5"},
        {"id": "claude-opus-4.5", "label": "Claude Opus 4.5"},
        {"id": "claude-sonnet-4", "label": "Claude Sonnet 4"},
        {"id": "gpt-5.2-codex", "label": "GPT-5.2 Codex"},
        {"id": "gpt-5.1-codex-max", "label": "GPT-5.1 Codex Max"},
        {"id": "gpt-5.1-codex", "label": "GPT-5.1 Codex"},
        {"id": "gpt-5.2", "label": "GPT-5.2"},
        {"id": "gpt-5.1", "label": "GPT-5.1"},
        {"id": "gpt-5", "label": "GPT-5"},
        {"id": "gpt-5.1-codex-mini", "label": "GPT-5.1 Codex Mini"},
        {"id": "gpt-5-mini", "label": "GPT-5 Mini"},
        {"id": "gpt-4.1", "label": "GPT-4.1"},
        {"id": "gemini-3-pro-preview", "label": "Gemini 3 Pro Preview"},
    ],
    "claude": [
        {"id": "sonnet", "label": "Sonnet (Latest)", "description": "Fast and intelligent"},
        {"id": "opus", "label": "Opus (Latest)", "description": "Most capable model"},
        {"id": "haiku", "label": "Haiku (Latest)", "description": "Fastest, most compact"},
        {"id": "claude-sonnet-4-20250514", "label": "Claude Sonnet 4"},
        {"id": "claude-opus-4-20250514", "label": "Claude Opus 4"},
        {"id": "claude-3-5-sonnet-20241022", "label": "Claude 3.5 Sonnet"},
        {"id": "claude-3-5-haiku-20241022", "label": "Claude 3.5 Haiku"},
    ],
}


# ---- Credential setup descriptors (diagnostics only) ----

SETUP_DESCRIPTORS: Mapping[str, Dict[str, object]] = {
    "openai": {
        "required_env_vars": ["OPENAI_API_KEY"],
        "docs_url": "https://platform.openai.com/api-keys",
        "steps": [
            "Create an API key in the OpenAI dashboard.",
            "Set OPENAI_API_KEY in your environment or .env file.",
            "Restart the server or container.",
        ],
    },
    "gemini": {
        "required_env_vars": ["GEMINI_API_KEY"],
        "docs_url": "https://ai.google.dev/gemini-api/docs/api-key",
        "steps": [
            "Create a Gemini API key in Google AI Studio.",
            "Set GEMINI_API_KEY in your environment or .env file.",
            "Restart the server or container.",
        ],
    },
    "copilot": {
        "required_env_vars": ["GH_TOKEN", "GITHUB_TOKEN"],
        "docs_url": "https://docs.github.com/copilot/concepts/agents/about-copilot-cli",
        "steps": [
            "Install the Copilot CLI and authenticate with /login or a PAT.",
            "Set GH_TOKEN or GITHUB_TOKEN with the Copilot Requests permission.",
            "If using Docker + OAuth login, mount ~/.config/github-copilot.",
            "Restart the server or container.",
        ],
    },
    "claude": {
        "required_env_vars": [],
        "docs_url": "https://code.claude.com/docs/en/setup",
        "steps": [
            "Install Claude Code and run `claude`, then use /login.",
            "Mount ~/.claude and ~/.claude.json into the container if needed.",
            "Restart the server or container.",
        ],
    },
}


__all__ = [
    "PROMPT_REFINER_SERVICE_CORS_DEFAULT_ORIGINS",
    "DISPATCH_TEMPERATURE",
    "CLARIFICATION_MAX_ROUNDS",
    "MODEL_CACHE_TTL_SECONDS",
    "MODEL_LIST_MAX_ENTRIES",
    "MODEL_LIST_MAX_BYTES",
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_DEFAULT_MODEL",
    "COPILOT_EXECUTABLE",
    "COPILOT_PROBE_MODEL",
    "CLAUDE_EXECUTABLE",
    "STORAGE_DIR_ENV",
    "STORAGE_DEFAULT_DIRNAME",
    "STORAGE_FILENAME",
    "FALLBACK_MODELS",
    "SETUP_DESCRIPTORS",
]
