"""Model catalog: cached, filtered model lists per provider.

Purpose
-------
Answer "which models can I pick for provider X" without ever failing the
caller. Live discovery goes through each transport's ``list_models``; results
are cached for the staleness window; any failure degrades to the bundled
fallback list (built-ins) or the record's configured list (custom providers)
with the reason in ``note``.

Rescan
------
``rescan_all`` re-fetches every provider that reports available. Providers
that are unavailable are skipped: their reason is recorded and their cache
entry is kept as is.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from .base.context import DispatchContext
from .base.errors import DispatchError, as_dispatch_error
from .base.factory import TransportFactory, TransportResolver
from .base.logging import LogContext, get_logger, log_event
from .base.model_cache import ModelCache
from .base.models import Availability, ModelInfo, ModelListing, Provider, RescanResult, dedupe_models
from .base.registry import ProviderRegistry

_logger = get_logger("catalog")

NO_MODELS_REASON = "No models found"


class ModelCatalog:
    """Model listing front door shared by the service and the UI.

    Parameters
    ----------
    registry:
        Provider lookup and persisted allow-list filters.
    ctx:
        Dispatch context used for discovery calls.
    cache:
        Shared :class:`ModelCache`; a private one is created when omitted.
    transport_resolver:
        ``(provider, ctx) -> Transport``; defaults to :class:`TransportFactory`.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        ctx: DispatchContext,
        cache: Optional[ModelCache] = None,
        transport_resolver: Optional[TransportResolver] = None,
    ) -> None:
        self.registry = registry
        self.ctx = ctx
        self.cache = cache if cache is not None else ModelCache()
        self._resolve = transport_resolver or TransportFactory.create

    # ---- internals ---------------------------------------------------------

    def _fetch(self, provider: Provider) -> List[ModelInfo]:
        """Run live discovery; every failure surfaces as ``DispatchError``."""
        try:
            transport = self._resolve(provider, self.ctx)
            return dedupe_models(transport.list_models(self.ctx))
        except Exception as exc:  # noqa: BLE001 - normalized below
            err = as_dispatch_error(exc, provider=provider.id)
            log_event(
                _logger,
                "models.fetch_failed",
                LogContext(provider=provider.id),
                code=err.code.value,
                error=err.message,
            )
            if err is exc:
                raise
            raise err from exc

    def _fallback(self, provider: Provider, reason: str) -> ModelListing:
        return ModelListing(
            provider=provider.id,
            models=provider.static_models,
            is_dynamic=False,
            note=f"Using fallback list: {reason}",
        )

    def _apply_filter(self, listing: ModelListing) -> ModelListing:
        allowed = self.registry.filtered_models(listing.provider)
        if not allowed:
            return listing
        models = tuple(m for m in listing.models if m.id in allowed)
        note = listing.note or f"Showing {len(models)} filtered model(s)."
        return ModelListing(provider=listing.provider, models=models, is_dynamic=listing.is_dynamic, note=note)

    def _listing(self, provider: Provider, force_refresh: bool) -> ModelListing:
        if not provider.builtin and not provider.supports_dynamic_models:
            return ModelListing(provider=provider.id, models=provider.static_models)
        if not force_refresh:
            entry = self.cache.get_fresh(provider.id)
            if entry is not None and entry.models:
                return ModelListing(
                    provider=provider.id,
                    models=entry.models,
                    is_dynamic=True,
                    note=f"Cached models (refreshed {entry.fetched_at_iso}).",
                )
        try:
            models = self._fetch(provider)
        except DispatchError as exc:
            return self._fallback(provider, exc.message)
        if not models:
            return self._fallback(provider, NO_MODELS_REASON)
        self.cache.put(provider.id, models)
        return ModelListing(provider=provider.id, models=tuple(models), is_dynamic=True)

    # ---- public API --------------------------------------------------------

    def get_models(self, provider_id: str, force_refresh: bool = False) -> ModelListing:
        """Return the model listing for ``provider_id``.

        Raises
        ------
        DispatchError
            ``UNSUPPORTED_PROVIDER`` for unknown ids. Discovery failures never
            raise; they produce a fallback listing.
        """
        provider = self.registry.get(provider_id)
        return self._apply_filter(self._listing(provider, force_refresh))

    def available_models(self, provider_id: str, force_refresh: bool = False) -> ModelListing:
        """Like :meth:`get_models` but ignoring the persisted allow-list.

        Used by the filter editor, which needs every model the provider offers.
        """
        return self._listing(self.registry.get(provider_id), force_refresh)

    def availability(self, provider_id: str) -> Availability:
        """Credential check for one provider; raises ``UNSUPPORTED_PROVIDER``."""
        return self.registry.availability(self.registry.get(provider_id), self.ctx)

    def rescan_all(self) -> Dict[str, RescanResult]:
        """Re-fetch every available provider's models.

        Returns
        -------
        dict
            ``provider_id -> RescanResult``. An empty live list counts as a
            failure with reason ``"No models found"``.
        """
        results: Dict[str, RescanResult] = {}
        for provider in self.registry.all():
            availability = self.registry.availability(provider, self.ctx)
            if not availability.available:
                results[provider.id] = RescanResult(success=False, reason=availability.reason)
                continue
            if not provider.builtin and not provider.supports_dynamic_models:
                results[provider.id] = RescanResult(success=True, count=len(provider.static_models))
                continue
            self.cache.invalidate(provider.id)
            try:
                models = self._fetch(provider)
            except DispatchError as exc:
                results[provider.id] = RescanResult(success=False, reason=exc.message)
                continue
            if not models:
                results[provider.id] = RescanResult(success=False, reason=NO_MODELS_REASON)
                continue
            self.cache.put(provider.id, models)
            results[provider.id] = RescanResult(success=True, count=len(models))
        log_event(
            _logger,
            "models.rescan",
            succeeded=sorted(k for k, v in results.items() if v.success),
            failed=sorted(k for k, v in results.items() if not v.success),
        )
        return results

    def providers_overview(self) -> List[Dict[str, object]]:
        """Provider rows with availability and setup hints, for listings."""
        rows: List[Dict[str, object]] = []
        for provider in self.registry.all():
            availability = self.registry.availability(provider, self.ctx)
            descriptor = self.registry.setup_descriptor(provider.id)
            row: Dict[str, object] = {
                **provider.to_dict(),
                **availability.to_dict(),
            }
            if descriptor is not None:
                row["setup"] = descriptor.to_dict()
            rows.append(row)
        return rows


__all__ = ["ModelCatalog", "NO_MODELS_REASON"]
