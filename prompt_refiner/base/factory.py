"""Transport factory.

Purpose
-------
Map a :class:`Provider` to the transport class that speaks its wire protocol.
Transport modules are imported lazily with ``importlib`` so that importing the
engine does not import every provider package.

Built-in ids map to their own transport; every custom provider uses the
OpenAI-compatible transport. No retries or fallbacks happen here: the factory
either returns an instance or raises ``DispatchError(UNSUPPORTED_PROVIDER)``.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Callable, Dict, Type

from .context import DispatchContext
from .errors import DispatchError, ErrorCode
from .interfaces import Transport
from .models import Provider

CUSTOM_TRANSPORT_KEY = "openai_compatible"

TransportResolver = Callable[[Provider, DispatchContext], Transport]


class TransportFactory:
    """Create transports for catalog entries."""

    # Map provider ids to import paths and class names
    _TRANSPORTS: Dict[str, Dict[str, str]] = {
        "openai": {"module": "prompt_refiner.openai.client", "class": "OpenAITransport"},
        "gemini": {"module": "prompt_refiner.gemini.client", "class": "GeminiTransport"},
        "copilot": {"module": "prompt_refiner.copilot.client", "class": "CopilotTransport"},
        "claude": {"module": "prompt_refiner.claude.client", "class": "ClaudeTransport"},
        CUSTOM_TRANSPORT_KEY: {
            "module": "prompt_refiner.openai_compatible.client",
            "class": "OpenAICompatibleTransport",
        },
    }

    @classmethod
    def transport_class(cls, provider: Provider) -> Type[Any]:
        """Resolve the transport class for ``provider``.

        Raises
        ------
        DispatchError
            ``UNSUPPORTED_PROVIDER`` when no transport is registered or the
            module/class cannot be loaded.
        """
        key = provider.id if provider.builtin else CUSTOM_TRANSPORT_KEY
        entry = cls._TRANSPORTS.get(key)
        if not entry:
            raise DispatchError(
                code=ErrorCode.UNSUPPORTED_PROVIDER,
                message=f"No transport registered for provider '{provider.id}'",
                provider=provider.id,
            )
        module_path, class_name = entry["module"], entry["class"]
        try:
            mod = import_module(module_path)
            return getattr(mod, class_name)
        except (ImportError, AttributeError) as exc:
            raise DispatchError(
                code=ErrorCode.UNSUPPORTED_PROVIDER,
                message=f"Failed to load transport '{class_name}' from '{module_path}': {exc}",
                provider=provider.id,
                raw=exc,
            ) from exc

    @classmethod
    def create(cls, provider: Provider, ctx: DispatchContext, **kwargs: Any) -> Transport:
        """Instantiate the transport for ``provider`` bound to ``ctx``.

        ``kwargs`` are forwarded to the constructor (``client=`` for HTTP
        transports, ``runner=``/``executable=`` for CLI transports).
        """
        klass = cls.transport_class(provider)
        return klass(provider, ctx, **kwargs)


__all__ = ["TransportFactory", "TransportResolver", "CUSTOM_TRANSPORT_KEY"]
