"""
OpenAI-compatible transport for user-added providers.

Speaks the OpenAI Chat Completions wire format against the record's
``base_url``. The URL is re-validated (absolute ``http``/``https`` only) each
time it is used, so a record edited on disk cannot redirect a request to
another scheme. JSON response mode is sent only when the record opts in.

Model discovery reads ``data[*].id`` from ``GET {base}/models``, refuses
bodies advertised larger than 5 MiB and keeps at most 1000 entries.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..base.context import DispatchContext
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelInfo, dedupe_models
from ..config.defaults import MODEL_LIST_MAX_BYTES, MODEL_LIST_MAX_ENTRIES
from ..openai.client import OpenAITransport

_logger = get_logger("providers.openai_compatible")


def parse_compatible_models(data: Mapping[str, Any], limit: int = MODEL_LIST_MAX_ENTRIES) -> List[ModelInfo]:
    items = data.get("data") if isinstance(data, Mapping) else None
    if not isinstance(items, list):
        return []
    models = [
        ModelInfo(id=item["id"], label=item["id"])
        for item in items
        if isinstance(item, Mapping) and isinstance(item.get("id"), str) and item["id"]
    ]
    return dedupe_models(models)[:limit]


class OpenAICompatibleTransport(OpenAITransport):
    """Transport for custom providers exposing an OpenAI-style API."""

    @property
    def json_mode(self) -> bool:  # type: ignore[override]
        return self.provider.json_mode

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
        ctx = ctx or self.ctx
        key = self.require_credential(ctx=ctx)
        data = self.request_json(
            "GET",
            f"{self.base_url}/models",
            headers={"Authorization": f"Bearer {key}"},
            timeout=ctx.timeouts.model_list_timeout_seconds,
            purpose="models",
            max_bytes=MODEL_LIST_MAX_BYTES,
        )
        models = parse_compatible_models(data)
        log_event(_logger, "models.fetched", LogContext(provider=self.provider.id), count=len(models))
        return models


__all__ = ["OpenAICompatibleTransport", "parse_compatible_models"]
