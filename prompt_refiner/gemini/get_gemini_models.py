"""
Gemini: get models

Behavior
- Lists models via ``GET {base}/models`` with the key in ``x-goog-api-key``.
- Keeps models that support ``generateContent`` and whose id contains
  ``gemini``; the label is ``"Display Name (id)"`` when a display name is
  present.
- Errors propagate as ``DispatchError``; the catalog decides on fallback.
"""


from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from ..base.context import DispatchContext
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelInfo, dedupe_models

if TYPE_CHECKING:  # pragma: no cover
    from .client import GeminiTransport

PROVIDER = "gemini"
_logger = get_logger("providers.gemini.models")


def _model_id(name: str) -> str:
    return name.rsplit("/", 1)[-1] if "/" in name else name


def parse_gemini_models(data: Mapping[str, Any]) -> List[ModelInfo]:
    """Return generateContent-capable Gemini models from a ``/models`` body."""
    items = data.get("models") if isinstance(data, Mapping) else None
    out: List[ModelInfo] = []
    for item in items or []:
        if not isinstance(item, Mapping):
            continue
        if "generateContent" not in (item.get("supportedGenerationMethods") or []):
            continue
        model_id = _model_id(str(item.get("name") or ""))
        if not model_id or "gemini" not in model_id:
            continue
        display = item.get("displayName")
        out.append(
            ModelInfo(
                id=model_id,
                label=f"{display} ({model_id})" if display else model_id,
                description=item.get("description") or None,
                context_window=item.get("inputTokenLimit"),
            )
        )
    return dedupe_models(out)


def fetch_gemini_models(transport: "GeminiTransport", ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
    ctx = ctx or transport.ctx
    key = transport.require_credential(ctx=ctx)
    data = transport.request_json(
        "GET",
        f"{transport.base_url}/models?pageSize=1000",
        headers={"x-goog-api-key": key},
        timeout=ctx.timeouts.model_list_timeout_seconds,
        purpose="models",
    )
    models = parse_gemini_models(data)
    log_event(_logger, "models.fetched", LogContext(provider=transport.provider.id), count=len(models))
    return models


__all__ = ["parse_gemini_models", "fetch_gemini_models"]
