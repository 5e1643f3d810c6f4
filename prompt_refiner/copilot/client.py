"""
Copilot CLI transport.

The ``copilot`` tool has no system prompt or schema flags, so the system
instructions, a JSON-only directive with the response schema and the user
content are sent as one ``-p`` prompt::

    copilot [--model <id>] -s -p <prompt>

The tool refuses to run in folders it does not trust; before each call the
working directory (``COPILOT_WORKDIR`` or the context's neutral directory) is
added to ``trusted_folders`` in its ``config.json``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..base.cli_transport import CliTransport
from ..base.context import DispatchContext
from ..base.instructions import build_inline_prompt
from ..base.logging import LogContext, get_logger, log_event
from ..base.models import ModelInfo, TransportRequest
from ..config.defaults import COPILOT_EXECUTABLE
from .get_copilot_models import probe_copilot_models

_logger = get_logger("providers.copilot")

WORKDIR_ENV = "COPILOT_WORKDIR"


def copilot_config_dir(ctx: DispatchContext) -> Path:
    """``$XDG_CONFIG_HOME/copilot`` or ``~/.copilot``."""
    xdg = ctx.getenv("XDG_CONFIG_HOME")
    return Path(xdg) / "copilot" if xdg else ctx.home / ".copilot"


def ensure_trusted_folder(ctx: DispatchContext, folder: Path) -> bool:
    """Add ``folder`` to ``trusted_folders``; return ``True`` when the file changed.

    An unreadable or non-JSON config is left untouched.
    """
    config_path = copilot_config_dir(ctx) / "config.json"
    payload: Dict[str, Any] = {}
    if config_path.exists():
        try:
            loaded = json.loads(config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log_event(
                _logger,
                "copilot.config_unreadable",
                LogContext(provider="copilot"),
                path=str(config_path),
                error=str(exc),
            )
            return False
        if isinstance(loaded, dict):
            payload = loaded

    folder_str = str(folder)
    trusted = payload.get("trusted_folders")
    if isinstance(trusted, list) and folder_str in trusted:
        return False
    if not isinstance(trusted, list):
        trusted = []
    trusted.append(folder_str)
    payload["trusted_folders"] = trusted

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return True


class CopilotTransport(CliTransport):
    """Transport for the GitHub Copilot CLI."""

    default_executable = COPILOT_EXECUTABLE

    def working_directory(self, request: Optional[TransportRequest] = None) -> Path:
        if request is not None and request.working_directory is not None:
            return Path(request.working_directory)
        override = self.ctx.getenv(WORKDIR_ENV)
        return Path(override) if override else self.ctx.working_directory

    def prepare(self, workdir: Path) -> None:
        ensure_trusted_folder(self.ctx, workdir)

    def build_args(self, request: TransportRequest) -> List[str]:
        prompt = build_inline_prompt(request.system_instructions, request.user_content)
        args = ["-s", "-p", prompt]
        if request.model_id:
            args = ["--model", request.model_id, *args]
        return args

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
        return probe_copilot_models(self, ctx)


__all__ = ["CopilotTransport", "copilot_config_dir", "ensure_trusted_folder"]
