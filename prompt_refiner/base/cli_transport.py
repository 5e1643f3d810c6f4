"""Shared base for locally invoked CLI transports.

Subclasses provide ``build_args(request)`` and, when the tool wraps its
answer in an envelope, ``unwrap(stdout)``. The base class runs the tool in the
context's neutral working directory through
:func:`~prompt_refiner.base.cli.runner.run_command`, so every CLI provider gets
the same stdin, environment, timeout and exit-status handling.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .cli import CommandResult, run_command
from .context import DispatchContext
from .models import Availability, ModelInfo, Provider, TransportKind, TransportRequest

Runner = Callable[..., CommandResult]


class CliTransport:
    """Base class for CLI providers.

    Parameters
    ----------
    provider:
        Catalog entry.
    ctx:
        Dispatch context (env, home, working directory, timeouts).
    runner:
        Subprocess runner; tests inject fakes with the ``run_command`` signature.
    executable:
        Override of the tool name or path.
    """

    kind = TransportKind.CLI
    default_executable: str = ""

    def __init__(
        self,
        provider: Provider,
        ctx: DispatchContext,
        runner: Optional[Runner] = None,
        executable: Optional[str] = None,
    ) -> None:
        self.provider = provider
        self.ctx = ctx
        self._runner: Runner = runner or run_command
        self.executable = executable or self.default_executable

    # ---- hooks -------------------------------------------------------------

    def build_args(self, request: TransportRequest) -> List[str]:  # pragma: no cover - abstract
        raise NotImplementedError

    def unwrap(self, stdout: str, request: TransportRequest) -> str:
        return stdout.strip()

    def prepare(self, workdir: Path) -> None:
        """Hook run before each invocation (e.g. trusting the working directory)."""

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:  # pragma: no cover
        raise NotImplementedError

    # ---- shared behavior ---------------------------------------------------

    def check_credential(self, ctx: Optional[DispatchContext] = None) -> Availability:
        return self.provider.credential_rule.evaluate(ctx or self.ctx)

    def working_directory(self, request: Optional[TransportRequest] = None) -> Path:
        if request is not None and request.working_directory is not None:
            return Path(request.working_directory)
        return self.ctx.working_directory

    def run(
        self,
        args: Sequence[str],
        *,
        timeout: float,
        model: Optional[str] = None,
        cwd: Optional[Path] = None,
        check: bool = True,
    ) -> CommandResult:
        return self._runner(
            [self.executable, *args],
            timeout=timeout,
            cwd=cwd or self.ctx.working_directory,
            env=self.ctx.env,
            provider=self.provider.id,
            model=model,
            check=check,
        )

    def invoke(self, request: TransportRequest) -> str:
        workdir = self.working_directory(request)
        self.prepare(workdir)
        timeout = request.timeout_seconds or self.ctx.timeouts.cli_timeout_seconds
        result = self.run(
            self.build_args(request), timeout=timeout, model=request.model_id or None, cwd=workdir
        )
        return self.unwrap(result.stdout, request)


__all__ = ["CliTransport", "Runner"]
