"""Tests for credential rules, the provider registry and persisted records."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from prompt_refiner.base.credentials import ConfigValue, EnvVar, FilePresence
from prompt_refiner.base.errors import DispatchError, ErrorCode
from prompt_refiner.base.models import TransportKind
from prompt_refiner.base.registry import ProviderRegistry
from prompt_refiner.persistence import JsonProvidersStore, default_store_path, is_valid_provider_id


def _write_store(path: Path, payload: dict) -> JsonProvidersStore:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return JsonProvidersStore(path)


def test_env_var_rule_uses_context_env_only(ctx) -> None:
    rule = EnvVar("OPENAI_API_KEY")
    assert rule.evaluate(ctx).reason == "OPENAI_API_KEY not set."
    assert rule.evaluate(ctx.with_env(OPENAI_API_KEY="   ")).available is False
    assert rule.evaluate(ctx.with_env(OPENAI_API_KEY="sk-test")).available is True


def test_env_var_rule_accepts_aliases(ctx) -> None:
    rule = EnvVar("GEMINI_API_KEY", ("GOOGLE_API_KEY",))
    assert rule.resolve(ctx.with_env(GOOGLE_API_KEY="g-key")) == "g-key"


def test_config_value_rule(ctx) -> None:
    assert ConfigValue(value="k").evaluate(ctx).available is True
    missing = ConfigValue(env_var="LOCAL_LLM_KEY").evaluate(ctx)
    assert missing.available is False
    assert "LOCAL_LLM_KEY" in (missing.reason or "")
    assert ConfigValue(env_var="LOCAL_LLM_KEY").resolve(ctx.with_env(LOCAL_LLM_KEY="abc")) == "abc"


def test_file_presence_rule(ctx) -> None:
    rule = FilePresence(("{home}/.claude.json", "{config}/tool"), env_vars=("TOOL_TOKEN",), missing_reason="nope")
    assert rule.evaluate(ctx).reason == "nope"
    assert rule.evaluate(ctx.with_env(TOOL_TOKEN="t")).available is True

    (ctx.home / ".config" / "tool").mkdir(parents=True)
    assert rule.evaluate(ctx).available is True


def test_builtin_catalog(ctx) -> None:
    registry = ProviderRegistry()
    ids = [p.id for p in registry.all()]
    assert ids == ["openai", "gemini", "copilot", "claude"]
    assert registry.get("copilot").transport_kind is TransportKind.CLI
    assert registry.get("OpenAI").base_url == "https://api.openai.com/v1"
    assert registry.get("claude").static_models[0].id == "sonnet"

    claude = registry.availability(registry.get("claude"), ctx)
    assert claude.available is False
    assert claude.reason == "Claude Code login not detected."
    (ctx.home / ".claude.json").write_text("{}", encoding="utf-8")
    assert registry.availability(registry.get("claude"), ctx).available is True


def test_unknown_provider_raises_unsupported() -> None:
    with pytest.raises(DispatchError) as info:
        ProviderRegistry().get("mistral")
    assert info.value.code is ErrorCode.UNSUPPORTED_PROVIDER


def test_setup_descriptor() -> None:
    descriptor = ProviderRegistry().setup_descriptor("copilot")
    assert descriptor is not None
    assert descriptor.to_dict()["env"] == ["GH_TOKEN", "GITHUB_TOKEN"]
    assert ProviderRegistry().setup_descriptor("custom-thing") is None


def test_custom_records_are_validated(tmp_path: Path, ctx) -> None:
    store = _write_store(
        tmp_path / "providers.json",
        {
            "providers": [
                {
                    "id": "local-llm",
                    "name": "Local LLM",
                    "config": {"type": "openai_compatible", "base_url": "http://localhost:1234/v1/", "env_var": "LOCAL_KEY"},
                    "supports_dynamic_models": True,
                    "models": [{"id": "llama-3"}],
                },
                {"id": "bad-url", "name": "Bad", "config": {"base_url": "file:///etc/passwd"}},
                {"id": "no-url", "name": "No URL", "config": {}},
                {"id": "openai", "name": "Shadow", "config": {"base_url": "https://evil.test"}},
                {"id": "X", "name": "Bad id", "config": {"base_url": "https://ok.test"}},
            ],
            "filtered_models": {"openai": ["gpt-4o"]},
        },
    )
    registry = ProviderRegistry(store=store)

    custom = registry.custom_providers()
    assert [p.id for p in custom] == ["local-llm", "no-url"]
    local = registry.get("local-llm")
    assert local.builtin is False
    assert local.base_url == "http://localhost:1234/v1"
    assert local.static_models[0].label == "llama-3"
    assert registry.get("openai").base_url == "https://api.openai.com/v1"

    assert registry.availability(local, ctx).available is False
    assert registry.availability(local, ctx.with_env(LOCAL_KEY="k")).available is True
    assert registry.filtered_models("openai") == ["gpt-4o"]
    assert registry.filtered_models("gemini") is None


def test_store_tolerates_missing_and_corrupt_files(tmp_path: Path) -> None:
    assert JsonProvidersStore(tmp_path / "missing.json").provider_records() == []
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert JsonProvidersStore(corrupt).provider_records() == []


def test_store_path_resolution(tmp_path: Path) -> None:
    assert default_store_path({}, tmp_path) == tmp_path / ".prompt-assistant" / "providers.json"
    assert default_store_path({"PROVIDERS_STORAGE_DIR": "/data"}, tmp_path) == Path("/data/providers.json")


@pytest.mark.parametrize(
    "provider_id, valid",
    [("ok", True), ("local-llm", True), ("a", False), ("-bad", False), ("bad-", False), ("UPPER", False), ("x" * 33, False)],
)
def test_provider_id_format(provider_id: str, valid: bool) -> None:
    assert is_valid_provider_id(provider_id) is valid
