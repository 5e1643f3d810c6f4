"""Subprocess runner for CLI transports and model probes.

Purpose
    Provide one blocking call that runs a trusted local CLI tool with a fixed
    argument vector, races its completion against a wall-clock timeout and
    kills the loser.

External Dependencies
    * Local CLI binaries (``copilot``, ``claude``) executed via :mod:`subprocess`.

Process Handling
    * ``shell=False``; the argument vector is passed through unchanged.
    * stdin is ``DEVNULL`` so tools can never block waiting for input.
    * The child environment is the context env plus ``NO_COLOR=1`` and
      ``TERM=dumb``.
    * The child starts a new session. On timeout the whole process group is
      killed (helpers spawned by the tool included), the pipes are closed and
      the child is reaped with a bounded wait before
      ``DispatchError(TRANSPORT_TIMEOUT)`` is raised; partial output is
      discarded.
    * stdout and stderr are read in full by ``communicate``.

Failure Modes
    * Executable missing -> ``TRANSPORT_FAILURE``.
    * Non-zero exit with ``check=True`` -> ``TRANSPORT_FAILURE`` carrying
      stderr (or stdout when stderr is empty).
"""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
import os
import signal
import shutil
import subprocess  # nosec B404 - required for invoking trusted local CLI tools (fixed arg list)
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple

from ..errors import DispatchError, ErrorCode, excerpt
from ..logging import LogContext, get_logger, log_event

_logger = get_logger("cli.runner")

CLI_ENV_OVERRIDES = {"NO_COLOR": "1", "TERM": "dumb"}

# Upper bound on waiting for a killed child to be reaped
REAP_TIMEOUT_SECONDS = 2.0


@dataclass(frozen=True)
class CommandResult:
    """Completed process output.

    Attributes:
        argv: Argument vector that was executed.
        returncode: Exit status.
        stdout: Full standard output.
        stderr: Full standard error.
        pid: Process id of the (now reaped) child.
    """

    argv: Tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str
    pid: int

    @property
    def combined(self) -> str:
        """stderr followed by stdout; probes parse whichever carries the text."""
        return "\n".join(part for part in (self.stderr, self.stdout) if part)

    @property
    def detail(self) -> str:
        return self.stderr.strip() or self.stdout.strip()


def _kill_process_group(proc: subprocess.Popen) -> None:
    """SIGKILL the child and everything it spawned into its session."""
    if os.name == "posix":
        with contextlib.suppress(ProcessLookupError, PermissionError):
            os.killpg(proc.pid, signal.SIGKILL)
            return
    with contextlib.suppress(ProcessLookupError):
        proc.kill()


def _reap(proc: subprocess.Popen, ctx: LogContext) -> None:
    """Wait a bounded time for the killed child; partial output is discarded."""
    for stream in (proc.stdout, proc.stderr):
        if stream is not None:
            with contextlib.suppress(OSError):
                stream.close()
    try:
        proc.wait(timeout=REAP_TIMEOUT_SECONDS)
    except subprocess.TimeoutExpired:
        log_event(_logger, "cli.reap_timeout", ctx, pid=proc.pid)


def resolve_executable(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the absolute path of ``name`` on ``PATH`` (from ``env``), or ``None``."""
    search_path = env.get("PATH") if env is not None else None
    found = shutil.which(name, path=search_path)
    return os.path.abspath(found) if found else None


def run_command(
    argv: Sequence[str],
    *,
    timeout: float,
    cwd: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    provider: str = "cli",
    model: Optional[str] = None,
    check: bool = True,
) -> CommandResult:
    """Run ``argv`` to completion or kill it after ``timeout`` seconds.

    Parameters
    ----------
    argv:
        Fixed argument vector; ``argv[0]`` is the executable.
    timeout:
        Wall-clock limit in seconds.
    cwd:
        Working directory for the child.
    env:
        Base environment; ``NO_COLOR``/``TERM`` overrides are applied on top.
    provider, model:
        Attached to raised errors and log events.
    check:
        Raise on non-zero exit when ``True``; probes pass ``False`` because
        their useful text arrives with a failing exit status.

    Raises
    ------
    DispatchError
        ``TRANSPORT_TIMEOUT`` or ``TRANSPORT_FAILURE``.
    """
    args = tuple(str(a) for a in argv)
    child_env = {**(dict(env) if env is not None else dict(os.environ)), **CLI_ENV_OVERRIDES}
    ctx = LogContext(provider=provider, model=model, transport="cli")

    try:
        proc = subprocess.Popen(  # nosec B603 - fixed arg list; shell=False
            list(args),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd) if cwd is not None else None,
            env=child_env,
            start_new_session=True,
        )
    except (FileNotFoundError, PermissionError) as exc:
        raise DispatchError(
            code=ErrorCode.TRANSPORT_FAILURE,
            message=f"{args[0]} could not be started: {exc}",
            provider=provider,
            model=model,
            raw=exc,
        ) from exc

    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _kill_process_group(proc)
        _reap(proc, ctx)
        log_event(_logger, "cli.timeout", ctx, pid=proc.pid, timeout_s=timeout, executable=args[0])
        raise DispatchError(
            code=ErrorCode.TRANSPORT_TIMEOUT,
            message=f"{os.path.basename(args[0])} timed out after {int(timeout * 1000)}ms",
            provider=provider,
            model=model,
            retryable=True,
            details={"pid": proc.pid, "timeout_s": timeout},
            raw=exc,
        ) from exc

    result = CommandResult(
        argv=args,
        returncode=proc.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
        pid=proc.pid,
    )
    if check and result.returncode != 0:
        detail = result.detail
        name = os.path.basename(args[0])
        raise DispatchError(
            code=ErrorCode.TRANSPORT_FAILURE,
            message=f"{name} exited with code {result.returncode}" + (f": {excerpt(detail, 500)}" if detail else ""),
            provider=provider,
            model=model,
            raw_excerpt=detail,
            details={"exit_code": result.returncode, "pid": result.pid},
        )
    return result


__all__ = ["CLI_ENV_OVERRIDES", "REAP_TIMEOUT_SECONDS", "CommandResult", "resolve_executable", "run_command"]
