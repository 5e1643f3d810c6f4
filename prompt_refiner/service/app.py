"""HTTP service exposing the dispatch engine and the model catalog.

Run with ``uvicorn --factory prompt_refiner.service.app:create_app``. When no
components are passed, they are built from the process environment (merged
with an optional ``.env`` file); this module is the only place that reads it.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_refiner.base.context import DispatchContext
from prompt_refiner.base.errors import DispatchError
from prompt_refiner.base.logging import get_logger, log_event
from prompt_refiner.base.models import DispatchRequest
from prompt_refiner.base.registry import ProviderRegistry, builtin_providers
from prompt_refiner.catalog import ModelCatalog
from prompt_refiner.config import get_provider_config, load_env
from prompt_refiner.config.defaults import PROMPT_REFINER_SERVICE_CORS_DEFAULT_ORIGINS
from prompt_refiner.dispatch import DispatchEngine
from prompt_refiner.persistence import JsonProvidersStore, default_store_path
from prompt_refiner.prompt_types import all_prompt_types, guidance_for

from .app_parts.app_core import (
    ImproveBody,
    build_available_models_response,
    build_models_response,
    build_providers_response,
    build_rescan_response,
    build_test_response,
    error_response,
    outcome_response,
)

CORS_ORIGINS_ENV = "PROMPT_REFINER_SERVICE_CORS_ORIGINS"

_logger = get_logger("service")


def build_components(
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[DispatchEngine, ModelCatalog]:
    """Wire registry, catalog and engine from an environment snapshot."""
    env = load_env(environ)
    ctx = DispatchContext.from_environment(env)
    registry = ProviderRegistry(
        store=JsonProvidersStore(default_store_path(env, ctx.home)),
        builtins=builtin_providers(
            openai_base_url=get_provider_config("openai", env)["base_url"],
            gemini_base_url=get_provider_config("gemini", env)["base_url"],
        ),
    )
    return DispatchEngine(registry, ctx), ModelCatalog(registry, ctx)


def create_app(
    engine: Optional[DispatchEngine] = None,
    catalog: Optional[ModelCatalog] = None,
    cors_origins: Optional[str] = None,
) -> FastAPI:
    """Build the FastAPI application.

    Parameters
    ----------
    engine, catalog:
        Pre-built components; both are built from the environment when
        either is missing.
    cors_origins:
        Comma-separated allowed origins; defaults to
        ``PROMPT_REFINER_SERVICE_CORS_ORIGINS`` or the local dev origins.
    """
    if engine is None or catalog is None:
        engine, catalog = build_components()
    if cors_origins is None:
        cors_origins = engine.ctx.env.get(CORS_ORIGINS_ENV, PROMPT_REFINER_SERVICE_CORS_DEFAULT_ORIGINS)

    app = FastAPI(title="Prompt Refiner Service", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"ok": True}

    @app.get("/providers")
    def get_providers() -> Dict[str, Any]:
        """List providers with availability and credential setup hints."""
        return build_providers_response(catalog)

    @app.get("/prompt-types")
    def get_prompt_types() -> Dict[str, Any]:
        return {"prompt_types": [t.to_dict() for t in all_prompt_types()]}

    @app.get("/models")
    def get_models(provider: str, refresh: bool = False) -> Any:
        """Model list for ``provider``; discovery failures fall back silently."""
        try:
            return build_models_response(catalog, provider, refresh)
        except DispatchError as err:
            return error_response(err)

    @app.get("/providers/{provider_id}/available-models")
    def get_available_models(provider_id: str, refresh: bool = False) -> Any:
        """Unfiltered model list, for editing the allow-list."""
        try:
            return build_available_models_response(catalog, provider_id, refresh)
        except DispatchError as err:
            return error_response(err)

    @app.post("/providers/{provider_id}/test")
    def test_provider(provider_id: str) -> Any:
        try:
            return build_test_response(catalog, provider_id)
        except DispatchError as err:
            return error_response(err)

    @app.post("/providers/rescan")
    def rescan_providers() -> Dict[str, Any]:
        return build_rescan_response(catalog)

    @app.post("/improve")
    def improve(body: ImproveBody) -> Any:
        """Refine a rough prompt with the selected provider and model."""
        request = DispatchRequest(
            provider_id=body.provider.strip().lower(),
            model_id=body.model,
            rough_prompt=body.rough_prompt,
            constraints=body.constraints,
            learning_mode=body.learning_mode,
            clarification_answers=body.clarifications,
            extra_system_guidance=guidance_for(body.prompt_type),
            credential=body.api_key,
        )
        outcome = engine.dispatch(request)
        if not outcome.ok:
            log_event(_logger, "service.improve_failed", provider=request.provider_id, code=outcome.error.code.value)
        return outcome_response(outcome)

    return app


__all__ = ["create_app", "build_components", "CORS_ORIGINS_ENV"]
