"""Shared base for JSON-over-HTTPS transports.

Subclasses implement three hooks:

- ``build_generate(request, credential)`` -> ``(url, headers, payload)``
- ``extract_text(data)`` -> reply text from the decoded response body
- ``list_models(ctx)`` -> live model list

The base class owns credential checking, the single POST, status
classification and JSON decoding so every HTTP provider fails the same way:

- missing credential -> ``CREDENTIAL_MISSING`` before any network I/O;
- client timeout -> ``TRANSPORT_TIMEOUT``;
- connection errors -> ``TRANSPORT_FAILURE``;
- non-2xx -> classified by :func:`classify_status` (401/403 ``AUTH``);
- undecodable body -> ``MALFORMED_OUTPUT``.

There is exactly one attempt per call.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlparse

import httpx

from .context import DispatchContext
from .errors import DispatchError, ErrorCode, classify_status
from .http import get_httpx_client
from .logging import LogContext, get_logger, log_event
from .models import Availability, ModelInfo, Provider, TransportKind, TransportRequest

_logger = get_logger("http.transport")


def validate_base_url(base_url: Optional[str], provider: str) -> str:
    """Return ``base_url`` without a trailing slash, or raise ``VALIDATION``.

    Only absolute ``http``/``https`` URLs with a host are accepted.
    """
    parsed = urlparse(base_url or "")
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise DispatchError(
            code=ErrorCode.VALIDATION,
            message=f"Invalid base URL for provider '{provider}': must be an http(s) URL.",
            provider=provider,
            details={"base_url": base_url},
        )
    return str(base_url).rstrip("/")


class HttpTransport:
    """Base class for HTTP providers."""

    kind = TransportKind.HTTP

    def __init__(
        self,
        provider: Provider,
        ctx: DispatchContext,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.provider = provider
        self.ctx = ctx
        self._client_override = client

    # ---- hooks -------------------------------------------------------------

    @property
    def base_url(self) -> str:
        return validate_base_url(self.provider.base_url, self.provider.id)

    def build_generate(
        self, request: TransportRequest, credential: str
    ) -> Tuple[str, Dict[str, str], Dict[str, Any]]:  # pragma: no cover - abstract
        raise NotImplementedError

    def extract_text(self, data: Mapping[str, Any]) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:  # pragma: no cover
        raise NotImplementedError

    # ---- shared behavior ---------------------------------------------------

    def client(self, purpose: str) -> httpx.Client:
        if self._client_override is not None:
            return self._client_override
        return get_httpx_client(self.provider.base_url, purpose)

    def check_credential(self, ctx: Optional[DispatchContext] = None) -> Availability:
        return self.provider.credential_rule.evaluate(ctx or self.ctx)

    def require_credential(
        self, explicit: Optional[str] = None, ctx: Optional[DispatchContext] = None, model: Optional[str] = None
    ) -> str:
        """Return ``explicit`` or the rule's secret; raise ``CREDENTIAL_MISSING``."""
        ctx = ctx or self.ctx
        credential = explicit or self.provider.credential_rule.resolve(ctx)
        if credential:
            return credential
        reason = self.provider.credential_rule.evaluate(ctx).reason or "Credential not configured."
        raise DispatchError(
            code=ErrorCode.CREDENTIAL_MISSING,
            message=reason,
            provider=self.provider.id,
            model=model,
        )

    def invoke(self, request: TransportRequest) -> str:
        credential = self.require_credential(request.credential, model=request.model_id)
        url, headers, payload = self.build_generate(request, credential)
        timeout = request.timeout_seconds or self.ctx.timeouts.http_timeout_seconds
        data = self.request_json(
            "POST", url, headers=headers, payload=payload, timeout=timeout, purpose="generate", model=request.model_id
        )
        return self.extract_text(data).strip()

    def malformed_reply(self, detail: str) -> DispatchError:
        return DispatchError(
            code=ErrorCode.MALFORMED_OUTPUT,
            message=f"{self.provider.display_name} returned an unexpected reply shape: {detail}",
            provider=self.provider.id,
        )

    def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        timeout: float,
        purpose: str,
        payload: Optional[Dict[str, Any]] = None,
        model: Optional[str] = None,
        max_bytes: Optional[int] = None,
    ) -> Any:
        """Perform one request and return the decoded JSON body."""
        ctx = LogContext(provider=self.provider.id, model=model, transport="http")
        try:
            resp = self.client(purpose).request(
                method, url, headers=dict(headers), json=payload, timeout=timeout
            )
        except httpx.TimeoutException as exc:
            log_event(_logger, "http.timeout", ctx, purpose=purpose, timeout_s=timeout)
            raise DispatchError(
                code=ErrorCode.TRANSPORT_TIMEOUT,
                message=f"{self.provider.display_name} request timed out after {timeout}s",
                provider=self.provider.id,
                model=model,
                retryable=True,
                raw=exc,
            ) from exc
        except httpx.RequestError as exc:
            raise DispatchError(
                code=ErrorCode.TRANSPORT_FAILURE,
                message=f"{self.provider.display_name} request failed: {exc}",
                provider=self.provider.id,
                model=model,
                raw=exc,
            ) from exc

        if not resp.is_success:
            code, retryable = classify_status(resp.status_code)
            log_event(_logger, "http.error_status", ctx, purpose=purpose, status=resp.status_code)
            raise DispatchError(
                code=code,
                message=f"{self.provider.display_name} request failed: {resp.status_code}",
                provider=self.provider.id,
                model=model,
                retryable=retryable,
                raw_excerpt=resp.text,
                details={"status": resp.status_code},
            )

        if max_bytes is not None:
            length = resp.headers.get("content-length")
            if length and length.isdigit() and int(length) > max_bytes:
                raise DispatchError(
                    code=ErrorCode.TRANSPORT_FAILURE,
                    message="Response too large",
                    provider=self.provider.id,
                    model=model,
                    details={"content_length": int(length), "limit": max_bytes},
                )

        try:
            return resp.json()
        except ValueError as exc:
            raise DispatchError(
                code=ErrorCode.MALFORMED_OUTPUT,
                message=f"{self.provider.display_name} returned a non-JSON body",
                provider=self.provider.id,
                model=model,
                raw_excerpt=resp.text,
                raw=exc,
            ) from exc


__all__ = ["HttpTransport", "validate_base_url"]
