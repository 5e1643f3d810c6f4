"""Explicit dispatch context.

``DispatchContext`` carries every piece of ambient state a transport or a
credential rule may consult: the environment mapping, the user's home
directory, the neutral working directory for CLI tools and the timeout
configuration. Nothing below the service layer reads ``os.environ`` or
``Path.home()`` directly, so tests can build a fully isolated context over a
temporary directory.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
import tempfile
from typing import Mapping, Optional

from .timeouts import TimeoutConfig, get_timeout_config


@dataclass(frozen=True)
class DispatchContext:
    """Immutable ambient state for one or more dispatch calls.

    Attributes:
        env: Environment variable snapshot (never the live ``os.environ``).
        home: Home directory used to locate CLI credential files.
        working_directory: Neutral directory CLI tools are spawned in.
        timeouts: Timeout values applied by transports.
    """

    env: Mapping[str, str] = field(default_factory=dict)
    home: Path = field(default_factory=Path.home)
    working_directory: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)

    @classmethod
    def from_environment(
        cls,
        env: Optional[Mapping[str, str]] = None,
        *,
        home: Optional[Path] = None,
        working_directory: Optional[Path] = None,
    ) -> "DispatchContext":
        """Build a context from ``env`` (defaults to a copy of ``os.environ``)."""
        snapshot = dict(os.environ if env is None else env)
        return cls(
            env=snapshot,
            home=Path(home) if home is not None else Path.home(),
            working_directory=(
                Path(working_directory)
                if working_directory is not None
                else Path(tempfile.gettempdir())
            ),
            timeouts=get_timeout_config(snapshot),
        )

    def getenv(self, name: str) -> Optional[str]:
        """Return a non-blank env value or ``None``."""
        value = self.env.get(name)
        return value if value is not None and value.strip() else None

    def config_dir(self) -> Path:
        """Return ``$XDG_CONFIG_HOME`` or ``~/.config``."""
        xdg = self.getenv("XDG_CONFIG_HOME")
        return Path(xdg) if xdg else self.home / ".config"

    def with_env(self, **overrides: str) -> "DispatchContext":
        """Return a copy whose env mapping includes ``overrides``."""
        return replace(self, env={**self.env, **overrides})


__all__ = ["DispatchContext"]
