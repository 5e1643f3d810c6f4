"""Dispatch engine: one refinement request to one provider.

Flow
----
1. Validate required fields (``provider_id``, ``model_id``, ``rough_prompt``).
2. Look the provider up in the registry.
3. Build the transport through the factory (or an injected resolver).
4. Render the system instructions and the ``Input:`` user block.
5. ``invoke`` once; no retries.
6. Coerce the reply into a tagged result. CLI transports also validate the
   reply against the JSON response schema.

Every failure is returned as ``Outcome.failure(DispatchError)``; nothing is
raised across the engine boundary.
"""

from __future__ import annotations

import time
from typing import Optional

from .base.coercion import coerce
from .base.context import DispatchContext
from .base.errors import DispatchError, ErrorCode, as_dispatch_error
from .base.factory import TransportFactory, TransportResolver
from .base.instructions import build_system_instructions, build_user_content
from .base.logging import LogContext, get_logger, log_event
from .base.models import DispatchOutcome, DispatchRequest, Outcome, TransportKind, TransportRequest
from .base.registry import ProviderRegistry
from .base.schema import RESULT_SCHEMA

_logger = get_logger("dispatch")


def _validate(request: DispatchRequest) -> None:
    missing = [
        name
        for name in ("provider_id", "model_id", "rough_prompt")
        if not str(getattr(request, name) or "").strip()
    ]
    if missing:
        raise DispatchError(
            code=ErrorCode.VALIDATION,
            message="provider, model, and rough_prompt are required.",
            provider=request.provider_id or "unknown",
            model=request.model_id or None,
            details={"missing": missing},
        )


class DispatchEngine:
    """Turns a :class:`DispatchRequest` into a :data:`DispatchOutcome`.

    Parameters
    ----------
    registry:
        Provider catalog.
    ctx:
        Explicit dispatch context; the engine never reads ``os.environ``.
    transport_resolver:
        ``(provider, ctx) -> Transport``; defaults to :class:`TransportFactory`.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        ctx: DispatchContext,
        transport_resolver: Optional[TransportResolver] = None,
    ) -> None:
        self.registry = registry
        self.ctx = ctx
        self._resolve = transport_resolver or TransportFactory.create

    def dispatch(self, request: DispatchRequest) -> DispatchOutcome:
        log_ctx = LogContext(
            provider=request.provider_id or None,
            model=request.model_id or None,
            conversation_id=request.conversation_id,
        )
        started = time.monotonic()
        log_event(_logger, "dispatch.start", log_ctx, learning_mode=request.learning_mode)
        try:
            _validate(request)
            provider = self.registry.get(request.provider_id)
            transport = self._resolve(provider, self.ctx)
            log_ctx.transport = provider.transport_kind.value
            transport_request = TransportRequest(
                system_instructions=build_system_instructions(request.extra_system_guidance),
                user_content=build_user_content(
                    request.rough_prompt,
                    request.constraints,
                    request.learning_mode,
                    request.clarification_answers,
                ),
                model_id=request.model_id,
                credential=request.credential,
            )
            raw = transport.invoke(transport_request)
            schema = RESULT_SCHEMA if provider.transport_kind is TransportKind.CLI else None
            result = coerce(
                raw,
                schema,
                learning_mode=request.learning_mode,
                provider=provider.id,
                model=request.model_id,
            )
        except Exception as exc:  # noqa: BLE001 - converted into the outcome
            err = as_dispatch_error(exc, provider=request.provider_id or "unknown", model=request.model_id or None)
            log_event(
                _logger,
                "dispatch.error",
                log_ctx,
                code=err.code.value,
                error=err.message,
                retryable=err.retryable,
                elapsed_ms=int((time.monotonic() - started) * 1000),
            )
            return Outcome.failure(err)

        log_event(
            _logger,
            "dispatch.success",
            log_ctx,
            kind=result.kind,
            elapsed_ms=int((time.monotonic() - started) * 1000),
        )
        return Outcome.success(result)


__all__ = ["DispatchEngine"]
