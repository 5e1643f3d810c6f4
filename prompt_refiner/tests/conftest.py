"""Pytest configuration for the prompt_refiner test suite.

Every test gets an isolated :class:`DispatchContext` whose home directory and
working directory live under ``tmp_path``; nothing reads the developer's real
home, credentials or CLI configuration.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest

from prompt_refiner.base.context import DispatchContext
from prompt_refiner.base.http import close_all_clients
from prompt_refiner.base.models import ModelInfo, Provider, TransportKind, TransportRequest
from prompt_refiner.base.timeouts import TimeoutConfig


@pytest.fixture()
def ctx(tmp_path: Path) -> DispatchContext:
    """Context over a temp home with only ``PATH`` inherited."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    return DispatchContext(
        env={"PATH": os.environ.get("PATH", "")},
        home=home,
        working_directory=work,
        timeouts=TimeoutConfig(
            http_timeout_seconds=5.0,
            cli_timeout_seconds=5.0,
            model_list_timeout_seconds=2.0,
            model_probe_timeout_seconds=2.0,
        ),
    )


@pytest.fixture()
def clarify_wire() -> Dict[str, Any]:
    return {
        "needs_clarification": True,
        "clarifications": [
            {
                "id": "bug_location",
                "question": "Which file or component has the bug?",
                "why_required": "The fix depends on where the failure happens.",
                "type": "short_text",
            },
            {
                "id": "language",
                "question": "Which language is the code written in?",
                "why_required": "Tooling differs per language.",
                "type": "single_select",
                "options": ["Python", "TypeScript", "Go"],
            },
        ],
        "improved_prompt": None,
        "is_already_excellent": False,
        "excellence_reason": None,
        "assumptions": [],
        "learning_report": None,
    }


@pytest.fixture()
def learning_report_wire() -> Dict[str, Any]:
    return {
        "overall_score": 82,
        "overall_justification": "Clear goal with minor gaps in acceptance criteria.",
        "category_scores": {
            "clarity_specificity": 90,
            "context_completeness": 80,
            "constraints_success_criteria": 75,
            "input_output_definition": 85,
            "ambiguity_assumptions": 80,
            "testability": 82,
        },
        "top_weaknesses": [
            {
                "issue": "No success criteria",
                "example": "make it faster",
                "fix": "State a target latency.",
            }
        ],
        "strengths": ["Specific scope"],
        "actionable_suggestions": ["Add an example input."],
    }


@pytest.fixture()
def improved_wire() -> Dict[str, Any]:
    return {
        "needs_clarification": False,
        "clarifications": [],
        "improved_prompt": "Fix the null pointer in parser.py when the input file is empty.",
        "is_already_excellent": False,
        "excellence_reason": None,
        "assumptions": ["Python 3.11"],
        "learning_report": None,
    }


class FakeTransport:
    """In-memory transport recording every request it receives."""

    def __init__(
        self,
        provider: Provider,
        replies: Optional[List[Any]] = None,
        models: Optional[List[ModelInfo]] = None,
        list_error: Optional[BaseException] = None,
    ) -> None:
        self.provider = provider
        self.kind = provider.transport_kind
        self.replies = list(replies or [])
        self.models = list(models or [])
        self.list_error = list_error
        self.requests: List[TransportRequest] = []
        self.list_calls = 0

    def invoke(self, request: TransportRequest) -> str:
        self.requests.append(request)
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    def list_models(self, ctx: Optional[DispatchContext] = None) -> List[ModelInfo]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return list(self.models)

    def check_credential(self, ctx: Optional[DispatchContext] = None):
        return self.provider.credential_rule.evaluate(ctx)


@pytest.fixture()
def fake_transport_cls() -> type:
    return FakeTransport


@pytest.fixture()
def resolver_for() -> Callable[..., Callable[[Provider, DispatchContext], FakeTransport]]:
    """Build a transport resolver returning pre-built fakes by provider id."""

    def _make(**fakes: FakeTransport) -> Callable[[Provider, DispatchContext], FakeTransport]:
        def _resolve(provider: Provider, _ctx: DispatchContext) -> FakeTransport:
            return fakes[provider.id]

        return _resolve

    return _make


@pytest.fixture()
def http_provider() -> Callable[..., Provider]:
    from prompt_refiner.base.credentials import EnvVar

    def _make(provider_id: str = "openai", base_url: str = "https://api.example.test/v1") -> Provider:
        return Provider(
            id=provider_id,
            display_name=provider_id.title(),
            transport_kind=TransportKind.HTTP,
            supports_dynamic_models=True,
            credential_rule=EnvVar(f"{provider_id.upper()}_API_KEY"),
            base_url=base_url,
        )

    return _make


@pytest.fixture(scope="session", autouse=True)
def close_http_clients_after_session():
    yield
    close_all_clients()
