"""
Claude Code CLI transport.

Invocation::

    claude -p <user content> --output-format json --json-schema <schema>
           --system-prompt <system instructions> --tools "" [--model <id>]

Tools are disabled so the call is a pure completion. The CLI prints a JSON
envelope; the structured reply is taken from ``structured_output`` when
present, else from ``result`` (an object, or a string holding JSON).
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional

from ..base.cli_transport import CliTransport
from ..base.coercion import safe_json_parse
from ..base.context import DispatchContext
from ..base.errors import DispatchError, ErrorCode
from ..base.models import ModelInfo, TransportRequest
from ..base.schema import RESULT_SCHEMA_JSON
from ..config.defaults import CLAUDE_EXECUTABLE
from .get_claude_models import probe_claude_models


class ClaudeTransport(CliTransport):
    """Transport for the Claude Code CLI in print mode."""

    default_executable = CLAUDE_EXECUTABLE

    def build_args(self, request: TransportRequest) -> List[str]:
        args = [
            "-p",
            request.user_content,
            "--output-format",
            "json",
            "--json-schema",
            RESULT_SCHEMA_JSON,
            "--system-prompt",
            request.system_instructions,
            "--tools",
            "",
        ]
        if request.model_id:
            args += ["--model", request.model_id]
        return args

    def _error(self, message: str, stdout: str, request: TransportRequest, code: ErrorCode) -> DispatchError:
        return DispatchError(
            code=code,
            message=message,
            provider=self.provider.id,
            model=request.model_id or None,
            raw_excerpt=stdout,
        )

    def unwrap(self, stdout: str, request: TransportRequest) -> str:
        ok, envelope = safe_json_parse(stdout)
        if not ok or not isinstance(envelope, Mapping):
            raise self._error("Claude CLI returned invalid JSON.", stdout, request, ErrorCode.MALFORMED_OUTPUT)

        if envelope.get("is_error"):
            detail = envelope.get("result") or envelope.get("subtype") or "unknown error"
            raise self._error(f"Claude CLI reported an error: {detail}", stdout, request, ErrorCode.TRANSPORT_FAILURE)

        structured: Any = envelope.get("structured_output")
        if isinstance(structured, Mapping) and structured:
            return json.dumps(structured)

        result = envelope.get("result")
        if isinstance(result, str):
            inner_ok, inner = safe_json_parse(result)
            if inner_ok:
                return json.dumps(inner)
        elif isinstance(result, Mapping):
            return json.dumps(result)

        raise self._error(
            "Claude CLI response missing structured output.", stdout, request, ErrorCode.MALFORMED_OUTPUT
        )

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
        return probe_claude_models(self, ctx)


__all__ = ["ClaudeTransport"]
