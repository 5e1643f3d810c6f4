"""Credential rules and availability resolution.

A provider's credential rule answers two questions against an explicit
:class:`~prompt_refiner.base.context.DispatchContext`:

- ``evaluate(ctx)``: is the provider usable, and if not, why not?
- ``resolve(ctx)``: which secret (if any) should be sent with a request?

Rules never read ``os.environ`` and never store secrets of their own, except
that a :class:`ConfigValue` carries the key pasted into a persisted record.

Three rules cover every provider:

``EnvVar(name)``
    Available iff the variable is set and non-blank.
``ConfigValue(value, env_var)``
    Available iff a value was supplied directly or the fallback variable is set.
``FilePresence(paths, env_vars)``
    Available iff any candidate path exists; any of ``env_vars`` set is an
    accepted alternative token source. Paths are templates expanded with
    ``{home}`` (the context home) and ``{config}`` (``$XDG_CONFIG_HOME`` or
    ``~/.config``).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .context import DispatchContext
from .models import Availability


@dataclass(frozen=True)
class EnvVar:
    name: str
    aliases: Tuple[str, ...] = ()

    def resolve(self, ctx: DispatchContext) -> Optional[str]:
        for candidate in (self.name, *self.aliases):
            if value := ctx.getenv(candidate):
                return value
        return None

    def evaluate(self, ctx: DispatchContext) -> Availability:
        if self.resolve(ctx):
            return Availability(True)
        return Availability(False, f"{self.name} not set.")


@dataclass(frozen=True)
class ConfigValue:
    value: Optional[str] = None
    env_var: Optional[str] = None

    def resolve(self, ctx: DispatchContext) -> Optional[str]:
        if self.value and self.value.strip():
            return self.value
        return ctx.getenv(self.env_var) if self.env_var else None

    def evaluate(self, ctx: DispatchContext) -> Availability:
        if self.resolve(ctx):
            return Availability(True)
        hint = f" (set {self.env_var} or configure in provider settings)" if self.env_var else ""
        return Availability(False, f"API key not configured{hint}.")


@dataclass(frozen=True)
class FilePresence:
    paths: Tuple[str, ...]
    env_vars: Tuple[str, ...] = ()
    missing_reason: str = "Credentials not detected."

    def candidate_paths(self, ctx: DispatchContext) -> List[Path]:
        return [
            Path(p.format(home=ctx.home, config=ctx.config_dir()))
            for p in self.paths
        ]

    def resolve(self, ctx: DispatchContext) -> Optional[str]:
        """Return a token from ``env_vars`` when set; file logins carry no secret."""
        for name in self.env_vars:
            if value := ctx.getenv(name):
                return value
        return None

    def evaluate(self, ctx: DispatchContext) -> Availability:
        if self.resolve(ctx):
            return Availability(True)
        if any(p.exists() for p in self.candidate_paths(ctx)):
            return Availability(True)
        return Availability(False, self.missing_reason)


CredentialRule = Union[EnvVar, ConfigValue, FilePresence]


@dataclass(frozen=True)
class SetupDescriptor:
    """Static credential-setup hints shown by diagnostics."""

    required_env_vars: Tuple[str, ...] = ()
    docs_url: Optional[str] = None
    steps: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "env": list(self.required_env_vars),
            "docs": self.docs_url,
            "steps": list(self.steps),
        }


__all__ = [
    "EnvVar",
    "ConfigValue",
    "FilePresence",
    "CredentialRule",
    "SetupDescriptor",
]
