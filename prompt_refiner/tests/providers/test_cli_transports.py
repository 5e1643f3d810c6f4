"""Tests for the Copilot and Claude Code CLI transports.

Subprocesses are replaced by a recording runner with the ``run_command``
signature, so these tests never need either tool installed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from prompt_refiner.base.cli import CommandResult
from prompt_refiner.base.errors import DispatchError, ErrorCode
from prompt_refiner.base.models import TransportRequest
from prompt_refiner.base.registry import ProviderRegistry
from prompt_refiner.base.schema import RESULT_SCHEMA_JSON
from prompt_refiner.claude.client import ClaudeTransport
from prompt_refiner.claude.get_claude_models import parse_claude_help
from prompt_refiner.copilot.client import CopilotTransport, copilot_config_dir, ensure_trusted_folder
from prompt_refiner.copilot.get_copilot_models import parse_allowed_choices, parse_help_choices


class RecordingRunner:
    """Returns canned results in order and records every call."""

    def __init__(self, *results: CommandResult) -> None:
        self.results = list(results)
        self.calls: List[Dict[str, Any]] = []

    def __call__(self, argv, *, timeout, cwd=None, env=None, provider, model=None, check=True, **_: Any):
        self.calls.append({"argv": list(argv), "timeout": timeout, "cwd": cwd, "check": check, "model": model})
        return self.results.pop(0)


def _result(stdout: str = "", stderr: str = "", returncode: int = 0) -> CommandResult:
    return CommandResult(argv=("tool",), returncode=returncode, stdout=stdout, stderr=stderr, pid=4242)


def _request(**overrides: Any) -> TransportRequest:
    fields: Dict[str, Any] = {"system_instructions": "SYSTEM", "user_content": "Input:\n{}", "model_id": ""}
    fields.update(overrides)
    return TransportRequest(**fields)


# ---- copilot ---------------------------------------------------------------


def test_parse_allowed_choices() -> None:
    text = "Error: Model invalid-model-to-list-choices is not available.\nAllowed choices are claude-sonnet-4.5, gpt-5, gpt-5-mini."
    models = parse_allowed_choices(text)
    assert models is not None
    assert [m.id for m in models] == ["claude-sonnet-4.5", "gpt-5", "gpt-5-mini"]
    assert models[2].label == "Gpt 5 Mini"


def test_parse_help_choices() -> None:
    text = '  --model <model>  Set the AI model to use (choices: "gpt-5", "claude-sonnet-4")\n  --help'
    models = parse_help_choices(text)
    assert models is not None
    assert [m.id for m in models] == ["gpt-5", "claude-sonnet-4"]
    assert parse_help_choices("no model flag here") is None


def test_ensure_trusted_folder_adds_once(ctx, tmp_path: Path) -> None:
    folder = tmp_path / "neutral"
    assert ensure_trusted_folder(ctx, folder) is True
    assert ensure_trusted_folder(ctx, folder) is False

    config = json.loads((ctx.home / ".copilot" / "config.json").read_text(encoding="utf-8"))
    assert config["trusted_folders"] == [str(folder)]


def test_ensure_trusted_folder_keeps_other_settings(ctx, tmp_path: Path) -> None:
    config_path = ctx.home / ".copilot" / "config.json"
    config_path.parent.mkdir(parents=True)
    config_path.write_text(json.dumps({"theme": "dark", "trusted_folders": ["/srv"]}), encoding="utf-8")

    ensure_trusted_folder(ctx, tmp_path)

    config = json.loads(config_path.read_text(encoding="utf-8"))
    assert config == {"theme": "dark", "trusted_folders": ["/srv", str(tmp_path)]}


def test_ensure_trusted_folder_leaves_invalid_json_alone(ctx, tmp_path: Path) -> None:
    config_path = ctx.home / ".copilot" / "config.json"
    config_path.parent.mkdir(parents=True)
    config_path.write_text("{not json", encoding="utf-8")

    assert ensure_trusted_folder(ctx, tmp_path) is False
    assert config_path.read_text(encoding="utf-8") == "{not json"


def test_copilot_config_dir_honors_xdg(ctx, tmp_path: Path) -> None:
    xdg = tmp_path / "xdg"
    assert copilot_config_dir(ctx.with_env(XDG_CONFIG_HOME=str(xdg))) == xdg / "copilot"


def test_copilot_invoke_builds_single_prompt(ctx) -> None:
    runner = RecordingRunner(_result(stdout='  {"improved_prompt": "x"}\n'))
    transport = CopilotTransport(ProviderRegistry().get("copilot"), ctx, runner=runner)

    reply = transport.invoke(_request(model_id="gpt-5"))

    assert reply == '{"improved_prompt": "x"}'
    argv = runner.calls[0]["argv"]
    assert argv[:5] == ["copilot", "--model", "gpt-5", "-s", "-p"]
    prompt = argv[5]
    assert prompt.startswith("SYSTEM")
    assert RESULT_SCHEMA_JSON in prompt
    assert prompt.endswith("Input:\n{}")
    assert runner.calls[0]["cwd"] == ctx.working_directory
    assert runner.calls[0]["timeout"] == ctx.timeouts.cli_timeout_seconds


def test_copilot_workdir_override_is_trusted(ctx, tmp_path: Path) -> None:
    workdir = tmp_path / "copilot-work"
    ctx = ctx.with_env(COPILOT_WORKDIR=str(workdir))
    runner = RecordingRunner(_result(stdout="{}"))

    CopilotTransport(ProviderRegistry().get("copilot"), ctx, runner=runner).invoke(_request())

    assert runner.calls[0]["cwd"] == workdir
    assert "--model" not in runner.calls[0]["argv"]
    config = json.loads((ctx.home / ".copilot" / "config.json").read_text(encoding="utf-8"))
    assert str(workdir) in config["trusted_folders"]


def test_copilot_models_fall_through_to_help(ctx) -> None:
    runner = RecordingRunner(
        _result(stderr="error: unknown model", returncode=1),
        _result(stdout='--model <model>  Set the AI model to use (choices: "gpt-5")'),
    )
    transport = CopilotTransport(ProviderRegistry().get("copilot"), ctx, runner=runner)

    models = transport.list_models()

    assert [m.id for m in models] == ["gpt-5"]
    assert runner.calls[0]["argv"][1:3] == ["--model", "invalid-model-to-list-choices"]
    assert runner.calls[1]["argv"][1:] == ["--help"]
    assert all(call["check"] is False for call in runner.calls)


def test_copilot_models_unparsed_is_malformed(ctx) -> None:
    runner = RecordingRunner(_result(stderr="boom", returncode=1), _result(stdout="usage: copilot"))
    transport = CopilotTransport(ProviderRegistry().get("copilot"), ctx, runner=runner)
    with pytest.raises(DispatchError) as info:
        transport.list_models()
    assert info.value.code is ErrorCode.MALFORMED_OUTPUT


# ---- claude ----------------------------------------------------------------


def test_parse_claude_help() -> None:
    text = (
        "--model <model>  Model for the current session. Provide an alias for the latest model "
        "(e.g. 'sonnet' or 'opus') or a model's full name (e.g. 'claude-sonnet-4-5-20250929')."
    )
    models = parse_claude_help(text)
    assert [m.id for m in models] == ["sonnet", "opus", "claude-sonnet-4-5-20250929"]
    assert models[0].label == "Sonnet"
    assert parse_claude_help("nothing useful") == []


def _claude(ctx, stdout: str) -> tuple:
    runner = RecordingRunner(_result(stdout=stdout))
    return ClaudeTransport(ProviderRegistry().get("claude"), ctx, runner=runner), runner


def test_claude_args(ctx) -> None:
    transport, runner = _claude(ctx, json.dumps({"structured_output": {"improved_prompt": "x"}}))
    transport.invoke(_request(model_id="sonnet"))
    argv = runner.calls[0]["argv"]
    assert argv[0] == "claude"
    assert argv[1:3] == ["-p", "Input:\n{}"]
    assert argv[argv.index("--json-schema") + 1] == RESULT_SCHEMA_JSON
    assert argv[argv.index("--system-prompt") + 1] == "SYSTEM"
    assert argv[argv.index("--tools") + 1] == ""
    assert argv[-2:] == ["--model", "sonnet"]


@pytest.mark.parametrize(
    "envelope, expected",
    [
        ({"structured_output": {"improved_prompt": "A"}, "result": "ignored"}, {"improved_prompt": "A"}),
        ({"result": '{"improved_prompt": "B"}'}, {"improved_prompt": "B"}),
        ({"result": {"improved_prompt": "C"}}, {"improved_prompt": "C"}),
    ],
)
def test_claude_unwrap_sources(ctx, envelope: Dict[str, Any], expected: Dict[str, Any]) -> None:
    transport, _ = _claude(ctx, json.dumps(envelope))
    assert json.loads(transport.invoke(_request())) == expected


@pytest.mark.parametrize(
    "stdout, code",
    [
        ("not json at all", ErrorCode.MALFORMED_OUTPUT),
        (json.dumps({"is_error": True, "result": "quota"}), ErrorCode.TRANSPORT_FAILURE),
        (json.dumps({"result": "plain words"}), ErrorCode.MALFORMED_OUTPUT),
    ],
)
def test_claude_unwrap_failures(ctx, stdout: str, code: ErrorCode) -> None:
    transport, _ = _claude(ctx, stdout)
    with pytest.raises(DispatchError) as info:
        transport.invoke(_request())
    assert info.value.code is code
    assert info.value.provider == "claude"
