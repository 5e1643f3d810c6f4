"""Request bodies and response builders for the HTTP service."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from prompt_refiner.base.errors import DispatchError, ErrorCode
from prompt_refiner.base.models import DispatchOutcome
from prompt_refiner.catalog import ModelCatalog

# Error code -> HTTP status for dispatch failures
STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.VALIDATION: 400,
    ErrorCode.UNSUPPORTED_PROVIDER: 400,
    ErrorCode.CREDENTIAL_MISSING: 400,
    ErrorCode.AUTH: 502,
    ErrorCode.MALFORMED_OUTPUT: 502,
    ErrorCode.TRANSPORT_FAILURE: 502,
    ErrorCode.CLARIFICATION_LOOP_EXCEEDED: 502,
    ErrorCode.TRANSPORT_TIMEOUT: 504,
}


class ImproveBody(BaseModel):
    """Body of ``POST /improve``.

    ``clarifications`` carries the answers collected so far, keyed by
    clarification id.
    """

    provider: str = ""
    model: str = ""
    rough_prompt: str = ""
    constraints: str = ""
    learning_mode: bool = False
    prompt_type: Optional[str] = None
    clarifications: Optional[Dict[str, Any]] = None
    api_key: Optional[str] = Field(default=None, repr=False)


def error_response(err: DispatchError) -> JSONResponse:
    return JSONResponse(status_code=STATUS_BY_CODE.get(err.code, 502), content=err.to_dict())


def outcome_response(outcome: DispatchOutcome) -> Any:
    """Successful results are returned in wire form, failures as JSON errors."""
    if outcome.error is not None:
        return error_response(outcome.error)
    return outcome.unwrap().to_wire()


def build_models_response(catalog: ModelCatalog, provider: str, refresh: bool) -> Dict[str, Any]:
    return catalog.get_models(provider, force_refresh=refresh).to_dict()


def build_available_models_response(catalog: ModelCatalog, provider: str, refresh: bool) -> Dict[str, Any]:
    return catalog.available_models(provider, force_refresh=refresh).to_dict()


def build_test_response(catalog: ModelCatalog, provider: str) -> Dict[str, Any]:
    """Credential check for one provider, as shown by the provider manager."""
    provider_id = provider.strip().lower()
    return {"provider": provider_id, **catalog.availability(provider_id).to_dict()}


def build_rescan_response(catalog: ModelCatalog) -> Dict[str, Any]:
    results = catalog.rescan_all()
    return {"message": "Rescan completed", "results": {k: v.to_dict() for k, v in results.items()}}


def build_providers_response(catalog: ModelCatalog) -> Dict[str, List[Dict[str, Any]]]:
    return {"providers": catalog.providers_overview()}


__all__ = [
    "STATUS_BY_CODE",
    "ImproveBody",
    "error_response",
    "outcome_response",
    "build_models_response",
    "build_available_models_response",
    "build_test_response",
    "build_rescan_response",
    "build_providers_response",
]
