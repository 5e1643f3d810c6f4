"""
Transport interface (Protocol) for the dispatch layer.

Every provider is reached through exactly one object implementing
:class:`Transport`. Transports are constructed per provider and context by
:class:`~prompt_refiner.base.factory.TransportFactory`.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .context import DispatchContext
from .models import Availability, ModelInfo, Provider, TransportKind, TransportRequest


@runtime_checkable
class Transport(Protocol):
    """Uniform contract over HTTP APIs and local CLI tools.

    Implementations translate a :class:`TransportRequest` into one provider
    call and return the raw reply text. They never retry and never coerce;
    failures are raised as :class:`~prompt_refiner.base.errors.DispatchError`.
    """

    provider: Provider
    kind: TransportKind

    def invoke(self, request: TransportRequest) -> str:
        """Perform one generation call and return the raw reply text."""
        ...

    def list_models(self, ctx: DispatchContext) -> List[ModelInfo]:
        """Discover models live; raise ``DispatchError`` on any failure."""
        ...

    def check_credential(self, ctx: DispatchContext) -> Availability:
        """Evaluate the provider's credential rule against ``ctx``."""
        ...


__all__ = ["Transport"]
