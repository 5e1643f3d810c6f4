"""Claude Code CLI model discovery.

Claude Code accepts model aliases (``sonnet``, ``opus``, ``haiku``) as well as
full versioned ids. Both are scraped from ``claude --help``; nothing found
raises ``DispatchError(MALFORMED_OUTPUT)`` so the catalog falls back to the
bundled list.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional

from ..base.context import DispatchContext
from ..base.errors import DispatchError, ErrorCode
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelInfo

if TYPE_CHECKING:  # pragma: no cover
    from .client import ClaudeTransport

PROVIDER = "claude"
_logger = get_logger("providers.claude.models")

_ALIAS_RE = re.compile(r"['\"]?(sonnet|opus|haiku)(?:\s+(\d+(?:\.\d+)?))?['\"]?", re.IGNORECASE)
_VERSIONED_RE = re.compile(r"claude-([a-z]+)-([\d-]+)", re.IGNORECASE)


def parse_claude_help(text: str) -> List[ModelInfo]:
    """Return aliases first, then versioned ids, each once."""
    seen: set[str] = set()
    models: List[ModelInfo] = []
    for match in _ALIAS_RE.finditer(text or ""):
        alias = match.group(1).lower()
        if alias in seen:
            continue
        seen.add(alias)
        version = f" {match.group(2)}" if match.group(2) else ""
        models.append(ModelInfo(id=alias, label=f"{alias.capitalize()}{version}"))
    for match in _VERSIONED_RE.finditer(text or ""):
        digits = match.group(2).strip("-")
        if not digits:
            continue
        family = match.group(1).lower()
        model_id = f"claude-{family}-{digits}"
        if model_id in seen:
            continue
        seen.add(model_id)
        models.append(
            ModelInfo(id=model_id, label=f"Claude {family.capitalize()} {digits.replace('-', '.')}")
        )
    return models


def probe_claude_models(transport: "ClaudeTransport", ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
    ctx = ctx or transport.ctx
    result = transport.run(["--help"], timeout=ctx.timeouts.model_probe_timeout_seconds)
    models = parse_claude_help(result.stdout)
    log_ctx = LogContext(provider=transport.provider.id, transport="cli")
    if not models:
        log_event(_logger, "models.probe_unparsed", log_ctx)
        raise DispatchError(
            code=ErrorCode.MALFORMED_OUTPUT,
            message="Could not find model names in Claude CLI help output.",
            provider=transport.provider.id,
            raw_excerpt=result.stdout,
        )
    log_event(_logger, "models.fetched", log_ctx, count=len(models))
    return models


__all__ = ["parse_claude_help", "probe_claude_models"]
