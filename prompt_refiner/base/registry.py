"""Provider registry.

Purpose
-------
Single lookup point for the provider catalog: the four immutable built-in
entries plus custom OpenAI-compatible entries read from the persisted
providers file on every call.

Custom records are validated when loaded:

- id format (enforced by the record model);
- ``base_url``, when set, must be an absolute ``http``/``https`` URL;
- ids that collide with a built-in are ignored.

Invalid records are skipped and logged, never raised.

Failure modes
-------------
``get`` raises ``DispatchError(UNSUPPORTED_PROVIDER)`` for unknown ids.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from ..config.defaults import FALLBACK_MODELS, OPENAI_DEFAULT_BASE_URL, GEMINI_DEFAULT_BASE_URL, SETUP_DESCRIPTORS
from ..config.env import ENV_ALIASES
from ..persistence.json_store import JsonProvidersStore, ProviderRecord
from .context import DispatchContext
from .credentials import ConfigValue, EnvVar, FilePresence, SetupDescriptor
from .errors import DispatchError, ErrorCode
from .http_transport import validate_base_url
from .logging import get_logger, log_event
from .models import Availability, ModelInfo, Provider, TransportKind

_logger = get_logger("registry")


def _fallback(provider_id: str) -> Tuple[ModelInfo, ...]:
    return tuple(ModelInfo.from_mapping(m) for m in FALLBACK_MODELS.get(provider_id, []))


def _aliases(provider_id: str, canonical: str) -> Tuple[str, ...]:
    return tuple(a for a in ENV_ALIASES.get(provider_id, ()) if a != canonical)


def builtin_providers(
    openai_base_url: str = OPENAI_DEFAULT_BASE_URL,
    gemini_base_url: str = GEMINI_DEFAULT_BASE_URL,
) -> Tuple[Provider, ...]:
    """Return the bundled catalog entries."""
    return (
        Provider(
            id="openai",
            display_name="OpenAI",
            transport_kind=TransportKind.HTTP,
            supports_dynamic_models=True,
            credential_rule=EnvVar("OPENAI_API_KEY", _aliases("openai", "OPENAI_API_KEY")),
            base_url=openai_base_url,
            static_models=_fallback("openai"),
            json_mode=True,
        ),
        Provider(
            id="gemini",
            display_name="Google Gemini",
            transport_kind=TransportKind.HTTP,
            supports_dynamic_models=True,
            credential_rule=EnvVar("GEMINI_API_KEY", _aliases("gemini", "GEMINI_API_KEY")),
            base_url=gemini_base_url,
            static_models=_fallback("gemini"),
            json_mode=True,
        ),
        Provider(
            id="copilot",
            display_name="Copilot CLI",
            transport_kind=TransportKind.CLI,
            supports_dynamic_models=True,
            credential_rule=FilePresence(
                paths=("{config}/github-copilot", "{config}/copilot", "{home}/.copilot"),
                env_vars=("GH_TOKEN", "GITHUB_TOKEN"),
                missing_reason="Copilot CLI auth not configured.",
            ),
            static_models=_fallback("copilot"),
        ),
        Provider(
            id="claude",
            display_name="Claude Code",
            transport_kind=TransportKind.CLI,
            supports_dynamic_models=True,
            credential_rule=FilePresence(
                paths=("{home}/.claude.json", "{home}/.claude"),
                missing_reason="Claude Code login not detected.",
            ),
            static_models=_fallback("claude"),
        ),
    )


def provider_from_record(record: ProviderRecord) -> Provider:
    """Build a custom :class:`Provider`; raises ``DispatchError(VALIDATION)``."""
    # a URL-less record still serves its configured models; calls fail VALIDATION
    base_url = validate_base_url(record.config.base_url, record.id) if record.config.base_url else None
    return Provider(
        id=record.id,
        display_name=record.name or record.id,
        transport_kind=TransportKind.HTTP,
        supports_dynamic_models=record.supports_dynamic_models,
        credential_rule=ConfigValue(value=record.config.api_key, env_var=record.config.env_var),
        base_url=base_url,
        static_models=tuple(
            ModelInfo(id=m.id, label=m.label or m.id, description=m.description) for m in record.models
        ),
        builtin=False,
        json_mode=record.config.json_mode,
    )


class ProviderRegistry:
    """Built-in plus persisted custom providers.

    Parameters
    ----------
    store:
        Persisted records; ``None`` means built-ins only.
    builtins:
        Override of the built-in catalog (tests point base URLs elsewhere).
    """

    def __init__(
        self,
        store: Optional[JsonProvidersStore] = None,
        builtins: Optional[Tuple[Provider, ...]] = None,
    ) -> None:
        self.store = store
        self._builtins: Dict[str, Provider] = {p.id: p for p in (builtins or builtin_providers())}

    def builtin_providers(self) -> List[Provider]:
        return list(self._builtins.values())

    def custom_providers(self) -> List[Provider]:
        if self.store is None:
            return []
        out: List[Provider] = []
        seen = set(self._builtins)
        for record in self.store.provider_records():
            if record.id in seen:
                log_event(_logger, "registry.custom_rejected", provider=record.id, reason="duplicate id")
                continue
            try:
                provider = provider_from_record(record)
            except DispatchError as exc:
                log_event(_logger, "registry.custom_rejected", provider=record.id, reason=exc.message)
                continue
            seen.add(provider.id)
            out.append(provider)
        return out

    def all(self) -> List[Provider]:
        return self.builtin_providers() + self.custom_providers()

    def get(self, provider_id: str) -> Provider:
        key = (provider_id or "").strip().lower()
        if key in self._builtins:
            return self._builtins[key]
        for provider in self.custom_providers():
            if provider.id == key:
                return provider
        raise DispatchError(
            code=ErrorCode.UNSUPPORTED_PROVIDER,
            message=f"Unknown provider '{provider_id}'",
            provider=key or "unknown",
        )

    def availability(self, provider: Provider, ctx: DispatchContext) -> Availability:
        return provider.credential_rule.evaluate(ctx)

    def setup_descriptor(self, provider_id: str) -> Optional[SetupDescriptor]:
        raw = SETUP_DESCRIPTORS.get(provider_id)
        if raw is None:
            return None
        return SetupDescriptor(
            required_env_vars=tuple(raw.get("required_env_vars", ())),  # type: ignore[arg-type]
            docs_url=raw.get("docs_url"),  # type: ignore[arg-type]
            steps=tuple(raw.get("steps", ())),  # type: ignore[arg-type]
        )

    def filtered_models(self, provider_id: str) -> Optional[List[str]]:
        return self.store.filtered_models(provider_id) if self.store is not None else None


__all__ = ["builtin_providers", "provider_from_record", "ProviderRegistry"]
