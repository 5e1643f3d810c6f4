"""
OpenAI models fetcher.

Lists models from ``GET {base}/models`` and keeps the chat-capable families
(ids starting with ``gpt`` or ``o1``), sorted by id. Failures propagate as
``DispatchError`` so the catalog can fall back to the bundled list.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from ..base.context import DispatchContext
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelInfo

if TYPE_CHECKING:  # pragma: no cover
    from .client import OpenAITransport

PROVIDER = "openai"
_logger = get_logger("providers.openai.models")

_CHAT_MODEL_RE = re.compile(r"^(gpt|o1)")


def parse_openai_models(data: Mapping[str, Any]) -> List[ModelInfo]:
    """Return chat model entries from an OpenAI ``/models`` response body."""
    items = data.get("data") if isinstance(data, Mapping) else None
    ids = sorted(
        {
            item.get("id")
            for item in items or []
            if isinstance(item, Mapping)
            and isinstance(item.get("id"), str)
            and _CHAT_MODEL_RE.match(item["id"])
        }
    )
    return [ModelInfo(id=model_id, label=model_id) for model_id in ids]


def fetch_openai_models(transport: "OpenAITransport", ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
    ctx = ctx or transport.ctx
    key = transport.require_credential(ctx=ctx)
    data = transport.request_json(
        "GET",
        f"{transport.base_url}/models",
        headers={"Authorization": f"Bearer {key}"},
        timeout=ctx.timeouts.model_list_timeout_seconds,
        purpose="models",
    )
    models = parse_openai_models(data)
    log_event(_logger, "models.fetched", LogContext(provider=transport.provider.id), count=len(models))
    return models


__all__ = ["parse_openai_models", "fetch_openai_models"]
