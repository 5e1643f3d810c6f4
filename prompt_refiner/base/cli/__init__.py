"""CLI process utilities package.

Exposes the blocking subprocess runner used by CLI transports and probes.
"""

from .runner import CLI_ENV_OVERRIDES, CommandResult, resolve_executable, run_command

__all__ = ["CLI_ENV_OVERRIDES", "CommandResult", "resolve_executable", "run_command"]
