"""Tests for the model cache and the catalog's fetch/fallback/rescan rules."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from prompt_refiner.base.errors import DispatchError, ErrorCode
from prompt_refiner.base.model_cache import ModelCache
from prompt_refiner.base.models import ModelInfo
from prompt_refiner.base.registry import ProviderRegistry
from prompt_refiner.catalog import ModelCatalog
from prompt_refiner.persistence import JsonProvidersStore


class Clock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


LIVE = [ModelInfo("gpt-4o", "gpt-4o"), ModelInfo("gpt-4o-mini", "gpt-4o-mini")]


def _catalog(ctx, resolver, store=None, clock=None):
    cache = ModelCache(ttl_seconds=60, clock=clock or Clock())
    return ModelCatalog(ProviderRegistry(store=store), ctx, cache=cache, transport_resolver=resolver)


def test_cache_staleness_window() -> None:
    clock = Clock()
    cache = ModelCache(ttl_seconds=10, clock=clock)
    assert cache.get_fresh("openai") is None
    cache.put("openai", LIVE)
    assert cache.get_fresh("openai").models == tuple(LIVE)
    clock.now += 10
    assert cache.get_fresh("openai") is None
    assert cache.get("openai") is not None
    cache.invalidate("openai")
    assert cache.get("openai") is None


def test_single_fetch_within_staleness_window(ctx, fake_transport_cls, resolver_for) -> None:
    registry = ProviderRegistry()
    fake = fake_transport_cls(registry.get("openai"), models=LIVE)
    catalog = _catalog(ctx, resolver_for(openai=fake))

    first = catalog.get_models("openai")
    second = catalog.get_models("openai")

    assert fake.list_calls == 1
    assert first.is_dynamic and first.note is None
    assert second.is_dynamic
    assert second.note.startswith("Cached models (refreshed ")
    assert [m.id for m in second.models] == ["gpt-4o", "gpt-4o-mini"]


def test_stale_entry_is_refetched(ctx, fake_transport_cls, resolver_for) -> None:
    clock = Clock()
    fake = fake_transport_cls(ProviderRegistry().get("openai"), models=LIVE)
    catalog = _catalog(ctx, resolver_for(openai=fake), clock=clock)

    catalog.get_models("openai")
    clock.now += 61
    catalog.get_models("openai")
    assert fake.list_calls == 2


def test_forced_refresh_always_fetches(ctx, fake_transport_cls, resolver_for) -> None:
    fake = fake_transport_cls(ProviderRegistry().get("openai"), models=LIVE)
    catalog = _catalog(ctx, resolver_for(openai=fake))

    catalog.get_models("openai")
    catalog.get_models("openai", force_refresh=True)
    catalog.get_models("openai", force_refresh=True)
    assert fake.list_calls == 3


def test_failure_falls_back_and_keeps_cache(ctx, fake_transport_cls, resolver_for) -> None:
    registry = ProviderRegistry()
    fake = fake_transport_cls(registry.get("openai"), models=LIVE)
    catalog = _catalog(ctx, resolver_for(openai=fake))
    catalog.get_models("openai")
    cached = catalog.cache.get("openai")

    fake.list_error = DispatchError(code=ErrorCode.AUTH, message="bad key", provider="openai")
    listing = catalog.get_models("openai", force_refresh=True)

    assert listing.is_dynamic is False
    assert listing.note == "Using fallback list: bad key"
    assert listing.models == registry.get("openai").static_models
    assert catalog.cache.get("openai") is cached


def test_unexpected_exception_also_falls_back(ctx, fake_transport_cls, resolver_for) -> None:
    fake = fake_transport_cls(ProviderRegistry().get("gemini"), list_error=RuntimeError("boom"))
    listing = _catalog(ctx, resolver_for(gemini=fake)).get_models("gemini")
    assert listing.is_dynamic is False
    assert listing.note == "Using fallback list: boom"


def test_empty_live_list_uses_fallback(ctx, fake_transport_cls, resolver_for) -> None:
    fake = fake_transport_cls(ProviderRegistry().get("copilot"), models=[])
    catalog = _catalog(ctx, resolver_for(copilot=fake))
    listing = catalog.get_models("copilot")
    assert listing.note == "Using fallback list: No models found"
    assert catalog.cache.get("copilot") is None


def test_filter_applies_to_live_and_cached_lists(tmp_path: Path, ctx, fake_transport_cls, resolver_for) -> None:
    store_path = tmp_path / "providers.json"
    store_path.write_text(json.dumps({"filtered_models": {"openai": ["gpt-4o-mini"]}}), encoding="utf-8")
    store = JsonProvidersStore(store_path)
    fake = fake_transport_cls(ProviderRegistry().get("openai"), models=LIVE)
    catalog = _catalog(ctx, resolver_for(openai=fake), store=store)

    live = catalog.get_models("openai")
    cached = catalog.get_models("openai")

    assert [m.id for m in live.models] == ["gpt-4o-mini"]
    assert live.note == "Showing 1 filtered model(s)."
    assert [m.id for m in cached.models] == ["gpt-4o-mini"]
    assert len(catalog.cache.get("openai").models) == 2


def test_static_custom_provider_is_not_fetched(tmp_path: Path, ctx, resolver_for) -> None:
    store_path = tmp_path / "providers.json"
    store_path.write_text(
        json.dumps(
            {
                "providers": [
                    {
                        "id": "lab",
                        "name": "Lab",
                        "config": {"base_url": "https://lab.test/v1", "api_key": "k"},
                        "supports_dynamic_models": False,
                        "models": [{"id": "lab-large", "label": "Lab Large"}],
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    catalog = _catalog(ctx, resolver_for(), store=JsonProvidersStore(store_path))
    listing = catalog.get_models("lab")
    assert listing.is_dynamic is False
    assert [m.label for m in listing.models] == ["Lab Large"]


def test_rescan_skips_unavailable_and_keeps_their_cache(ctx, fake_transport_cls, resolver_for) -> None:
    registry = ProviderRegistry()
    ctx = ctx.with_env(OPENAI_API_KEY="sk-test", GH_TOKEN="gh")
    openai = fake_transport_cls(registry.get("openai"), models=[ModelInfo("gpt-5", "gpt-5")])
    gemini = fake_transport_cls(registry.get("gemini"), models=LIVE)
    copilot = fake_transport_cls(registry.get("copilot"), models=[])
    claude = fake_transport_cls(registry.get("claude"), models=LIVE)
    catalog = _catalog(ctx, resolver_for(openai=openai, gemini=gemini, copilot=copilot, claude=claude))
    gemini_entry = catalog.cache.put("gemini", [ModelInfo("gemini-old", "old")])

    results = catalog.rescan_all()

    assert results["openai"].to_dict() == {"success": True, "count": 1}
    assert results["gemini"].to_dict() == {"success": False, "reason": "GEMINI_API_KEY not set."}
    assert results["copilot"].to_dict() == {"success": False, "reason": "No models found"}
    assert results["claude"].reason == "Claude Code login not detected."
    assert catalog.cache.get("gemini") is gemini_entry
    assert catalog.cache.get("openai").models[0].id == "gpt-5"
    assert gemini.list_calls == 0 and claude.list_calls == 0


def test_providers_overview(ctx, resolver_for) -> None:
    rows = _catalog(ctx.with_env(OPENAI_API_KEY="sk"), resolver_for()).providers_overview()
    by_id = {row["id"]: row for row in rows}
    assert by_id["openai"]["available"] is True
    assert by_id["gemini"]["available"] is False
    assert by_id["copilot"]["setup"]["env"] == ["GH_TOKEN", "GITHUB_TOKEN"]


def test_custom_provider_without_base_url_serves_configured_models(tmp_path: Path, ctx) -> None:
    store_path = tmp_path / "providers.json"
    store_path.write_text(
        json.dumps(
            {
                "providers": [
                    {"id": "my-llm", "config": {"type": "api_key", "api_key": "k"}, "models": [{"id": "m1"}]},
                    {
                        "id": "my-dyn",
                        "config": {"api_key": "k"},
                        "supports_dynamic_models": True,
                        "models": [{"id": "d1"}],
                    },
                ]
            }
        ),
        encoding="utf-8",
    )
    registry = ProviderRegistry(store=JsonProvidersStore(store_path))
    catalog = ModelCatalog(registry, ctx)

    assert {"my-llm", "my-dyn"} <= {p.id for p in registry.all()}
    assert registry.get("my-llm").display_name == "my-llm"

    static = catalog.get_models("my-llm")
    assert [m.id for m in static.models] == ["m1"]
    assert static.is_dynamic is False

    dynamic = catalog.get_models("my-dyn")
    assert [m.id for m in dynamic.models] == ["d1"]
    assert dynamic.note.startswith("Using fallback list: Invalid base URL")


def test_available_models_ignore_the_allow_list(tmp_path: Path, ctx, fake_transport_cls, resolver_for) -> None:
    store_path = tmp_path / "providers.json"
    store_path.write_text(json.dumps({"filtered_models": {"openai": ["gpt-4o-mini"]}}), encoding="utf-8")
    fake = fake_transport_cls(ProviderRegistry().get("openai"), models=LIVE)
    catalog = _catalog(ctx, resolver_for(openai=fake), store=JsonProvidersStore(store_path))

    assert [m.id for m in catalog.get_models("openai").models] == ["gpt-4o-mini"]
    assert [m.id for m in catalog.available_models("openai").models] == ["gpt-4o", "gpt-4o-mini"]
    assert fake.list_calls == 1


def test_availability_by_id(ctx, resolver_for) -> None:
    catalog = _catalog(ctx.with_env(OPENAI_API_KEY="sk"), resolver_for())
    assert catalog.availability("OpenAI").available is True
    assert catalog.availability("gemini").to_dict() == {"available": False, "reason": "GEMINI_API_KEY not set."}
    with pytest.raises(DispatchError) as info:
        catalog.availability("mistral")
    assert info.value.code is ErrorCode.UNSUPPORTED_PROVIDER
