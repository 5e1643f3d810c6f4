"""Copilot CLI model discovery.

Purpose
    Discover the models the installed ``copilot`` CLI accepts. The CLI has no
    list command, so it is asked to use a deliberately invalid model; its
    error message enumerates the valid ones::

        Allowed choices are claude-sonnet-4.5, gpt-5, gpt-5-mini.

    Some versions print the list in their help text instead::

        --model <model>  Set the AI model to use (choices: "gpt-5", "claude-sonnet-4")

Fallback Semantics
    No match in either form raises ``DispatchError(MALFORMED_OUTPUT)``; the
    catalog turns that into the bundled fallback list. Probe timeouts surface
    as ``TRANSPORT_TIMEOUT`` from the runner.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, List, Optional

from ..base.context import DispatchContext
from ..base.errors import DispatchError, ErrorCode
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelInfo, dedupe_models, label_from_id
from ..config.defaults import COPILOT_PROBE_MODEL

if TYPE_CHECKING:  # pragma: no cover
    from .client import CopilotTransport

PROVIDER = "copilot"
_logger = get_logger("providers.copilot.models")

_ALLOWED_RE = re.compile(r"Allowed choices are (.+?)\.?$", re.MULTILINE)
_HELP_RE = re.compile(r"--model\s+<model>\s+[^(]*\(choices:\s*([^)]+)\)", re.IGNORECASE | re.DOTALL)
_QUOTED_RE = re.compile(r'"([^"]+)"')


def _to_models(ids: List[str]) -> List[ModelInfo]:
    return dedupe_models(ModelInfo(id=i, label=label_from_id(i)) for i in ids if i)


def parse_allowed_choices(text: str) -> Optional[List[ModelInfo]]:
    """Parse the ``Allowed choices are a, b, c.`` error form."""
    match = _ALLOWED_RE.search(text or "")
    if not match:
        return None
    ids = [part.strip().strip("\"'`") for part in match.group(1).split(",")]
    models = _to_models(ids)
    return models or None


def parse_help_choices(text: str) -> Optional[List[ModelInfo]]:
    """Parse the ``--model <model> ... (choices: "a", "b")`` help form."""
    match = _HELP_RE.search(text or "")
    if not match:
        return None
    models = _to_models(_QUOTED_RE.findall(match.group(1)))
    return models or None


def parse_copilot_models(text: str) -> Optional[List[ModelInfo]]:
    return parse_allowed_choices(text) or parse_help_choices(text)


def probe_copilot_models(transport: "CopilotTransport", ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
    """Run the invalid-model probe (and ``--help`` as a second source)."""
    ctx = ctx or transport.ctx
    timeout = ctx.timeouts.model_probe_timeout_seconds
    log_ctx = LogContext(provider=transport.provider.id, transport="cli")

    result = transport.run(["--model", COPILOT_PROBE_MODEL, "-p", "test"], timeout=timeout, check=False)
    models = parse_copilot_models(result.combined)
    if models is None:
        help_result = transport.run(["--help"], timeout=timeout, check=False)
        models = parse_help_choices(help_result.combined)
    if not models:
        log_event(_logger, "models.probe_unparsed", log_ctx, exit_code=result.returncode)
        raise DispatchError(
            code=ErrorCode.MALFORMED_OUTPUT,
            message="Could not find a model list in Copilot CLI output.",
            provider=transport.provider.id,
            raw_excerpt=result.combined,
        )
    log_event(_logger, "models.fetched", log_ctx, count=len(models))
    return models


__all__ = [
    "parse_allowed_choices",
    "parse_help_choices",
    "parse_copilot_models",
    "probe_copilot_models",
]
