"""JSON file store for persisted provider records (read side).

The store file holds ``{"providers": [...], "filtered_models": {...}}`` and is
owned by an external editor (the UI's provider manager). This module only
reads it, once per call, so edits made by another process are picked up
without a restart; last writer wins.

Location: ``$PROVIDERS_STORAGE_DIR/providers.json``, defaulting to
``~/.prompt-assistant/providers.json``.

Failure Semantics
-----------------
- Missing file -> empty store.
- Unreadable or non-JSON file -> empty store, logged as ``store.read_failed``.
- Individual records that fail validation are skipped and logged; they never
  poison the rest of the file.
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..base.logging import get_logger, log_event
from ..config.defaults import STORAGE_DEFAULT_DIRNAME, STORAGE_DIR_ENV, STORAGE_FILENAME

_logger = get_logger("persistence.json_store")

PROVIDER_ID_RE = re.compile(r"^[a-z][a-z0-9-]*[a-z0-9]$")
PROVIDER_ID_MIN_LEN = 2
PROVIDER_ID_MAX_LEN = 32


def is_valid_provider_id(provider_id: str) -> bool:
    return (
        PROVIDER_ID_MIN_LEN <= len(provider_id) <= PROVIDER_ID_MAX_LEN
        and bool(PROVIDER_ID_RE.match(provider_id))
    )


class ProviderRecordConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Literal["openai_compatible", "api_key"] = "openai_compatible"
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    env_var: Optional[str] = None
    json_mode: bool = False


class ModelRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    label: Optional[str] = None
    description: Optional[str] = None


class ProviderRecord(BaseModel):
    """A user-added provider as persisted by the provider manager."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    config: ProviderRecordConfig = Field(default_factory=ProviderRecordConfig)
    supports_dynamic_models: bool = False
    models: List[ModelRecord] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        if not is_valid_provider_id(value):
            raise ValueError(
                "provider id must be 2-32 chars of [a-z0-9-], start with a letter "
                "and end with a letter or digit"
            )
        return value


def default_store_path(env: Mapping[str, str], home: Path) -> Path:
    """Resolve the providers file from ``PROVIDERS_STORAGE_DIR`` or the home dir."""
    base = env.get(STORAGE_DIR_ENV)
    directory = Path(base) if base else home / STORAGE_DEFAULT_DIRNAME
    return directory / STORAGE_FILENAME


class JsonProvidersStore:
    """Read-only view over ``providers.json``."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _read(self) -> Dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log_event(_logger, "store.read_failed", path=str(self.path), error=str(exc))
            return {}
        return data if isinstance(data, dict) else {}

    def provider_records(self) -> List[ProviderRecord]:
        """Return validated custom provider records; invalid ones are skipped."""
        out: List[ProviderRecord] = []
        raw = self._read().get("providers") or []
        for item in raw if isinstance(raw, list) else []:
            try:
                out.append(ProviderRecord.model_validate(item))
            except ValidationError as exc:
                log_event(
                    _logger,
                    "store.record_rejected",
                    record_id=item.get("id") if isinstance(item, dict) else None,
                    errors=[e.get("msg") for e in exc.errors()],
                )
        return out

    def filtered_models(self, provider_id: str) -> Optional[List[str]]:
        """Return the allow-listed model ids for ``provider_id`` or ``None``."""
        filters = self._read().get("filtered_models") or {}
        ids = filters.get(provider_id) if isinstance(filters, dict) else None
        if not ids or not isinstance(ids, list):
            return None
        return [str(i) for i in ids]


__all__ = [
    "PROVIDER_ID_RE",
    "is_valid_provider_id",
    "ProviderRecordConfig",
    "ModelRecord",
    "ProviderRecord",
    "default_store_path",
    "JsonProvidersStore",
]
