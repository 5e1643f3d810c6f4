"""Response coercion: free-form model text -> validated StructuredResult.

Steps
-----
1. Parse the whole text as JSON.
2. On failure, parse the substring between the first ``{`` and the last
   ``}`` (models like to wrap JSON in prose or markdown fences).
3. When both fail, raise ``DispatchError(MALFORMED_OUTPUT)`` with a bounded
   excerpt of the raw text.
4. The parsed value must be an object. When a JSON schema is supplied it is
   validated with ``jsonschema``; the pydantic wire model is always applied.
5. An ``Excellent`` verdict is rejected when learning mode was off.

No step retries the provider.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .errors import DispatchError, ErrorCode
from .models import Excellent, Improved, NeedsClarification, StructuredResultWire
from .schema import schema_errors

Result = Union[NeedsClarification, Excellent, Improved]


def safe_json_parse(text: str) -> Tuple[bool, Any]:
    """Return ``(True, value)`` on success, ``(False, error)`` otherwise."""
    try:
        return True, json.loads(text)
    except (TypeError, ValueError) as exc:
        first = text.find("{") if isinstance(text, str) else -1
        last = text.rfind("}") if isinstance(text, str) else -1
        if first != -1 and last > first:
            try:
                return True, json.loads(text[first : last + 1])
            except ValueError as slice_exc:
                return False, slice_exc
        return False, exc


def _malformed(message: str, raw: Any, provider: str, model: Optional[str], **details: Any) -> DispatchError:
    raw_text = raw if isinstance(raw, str) else json.dumps(raw, default=str)
    return DispatchError(
        code=ErrorCode.MALFORMED_OUTPUT,
        message=message,
        provider=provider,
        model=model,
        raw_excerpt=raw_text,
        details={k: v for k, v in details.items() if v is not None},
    )


def coerce(
    raw: Union[str, Mapping[str, Any]],
    schema: Optional[Dict[str, Any]] = None,
    *,
    learning_mode: Optional[bool] = None,
    provider: str = "unknown",
    model: Optional[str] = None,
) -> Result:
    """Coerce raw provider output into a tagged :data:`StructuredResult`.

    Parameters
    ----------
    raw:
        Reply text, or an already-decoded object (CLI envelopes).
    schema:
        Optional JSON schema to validate against before the structural check.
    learning_mode:
        When ``False``, an ``Excellent`` verdict is malformed.
    provider, model:
        Attached to any raised error.

    Raises
    ------
    DispatchError
        ``MALFORMED_OUTPUT`` for unparseable, non-object, schema-invalid or
        structurally invalid payloads.
    """
    if isinstance(raw, Mapping):
        value: Any = dict(raw)
    else:
        ok, value = safe_json_parse(raw or "")
        if not ok:
            raise _malformed("Model returned invalid JSON.", raw or "", provider, model)

    if not isinstance(value, dict):
        raise _malformed("Model returned JSON that is not an object.", raw, provider, model)

    if schema is not None:
        errors = schema_errors(value, schema)
        if errors:
            raise _malformed(
                "Model output does not match the response schema.",
                raw,
                provider,
                model,
                schema_errors=errors[:10],
            )

    try:
        result = StructuredResultWire.model_validate(value).to_result()
    except ValidationError as exc:
        raise _malformed(
            "Model output has an invalid shape.",
            raw,
            provider,
            model,
            validation=[e.get("msg") for e in exc.errors()][:10],
        ) from exc

    if isinstance(result, Excellent) and learning_mode is False:
        raise _malformed(
            "Model graded the prompt as excellent although learning mode is off.",
            raw,
            provider,
            model,
        )
    return result


__all__ = ["safe_json_parse", "coerce"]
