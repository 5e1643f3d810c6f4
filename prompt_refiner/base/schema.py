"""JSON schema for the structured reply.

The schema is handed verbatim to CLI tools that accept one (``--json-schema``)
or embedded in the prompt for those that do not, and the coercer validates CLI
replies against it with ``jsonschema`` before the pydantic structural check.

Top-level ``properties`` list every wire field; the ``oneOf`` branches only
narrow the clarification and result shapes.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

_SCORE: Dict[str, Any] = {"type": "number", "minimum": 0, "maximum": 100}

CLARIFICATION_ITEM_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": ["id", "question", "why_required", "type"],
    "properties": {
        "id": {"type": "string"},
        "question": {"type": "string"},
        "why_required": {"type": "string"},
        "type": {
            "type": "string",
            "enum": [
                "single_select",
                "multi_select",
                "short_text",
                "long_text",
                "number",
                "boolean",
            ],
        },
        "options": {"type": "array", "items": {"type": "string"}},
        "default": {
            "anyOf": [
                {"type": "string"},
                {"type": "number"},
                {"type": "boolean"},
                {"type": "array"},
                {"type": "object"},
                {"type": "null"},
            ]
        },
        "validation": {"type": "object", "additionalProperties": True},
    },
}

_CATEGORIES: List[str] = [
    "clarity_specificity",
    "context_completeness",
    "constraints_success_criteria",
    "input_output_definition",
    "ambiguity_assumptions",
    "testability",
]

LEARNING_REPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "required": [
        "overall_score",
        "overall_justification",
        "category_scores",
        "top_weaknesses",
        "strengths",
        "actionable_suggestions",
    ],
    "properties": {
        "overall_score": _SCORE,
        "total_score": {"type": "number"},
        "overall_justification": {"type": "string"},
        "category_scores": {
            "type": "object",
            "additionalProperties": False,
            "required": list(_CATEGORIES),
            "properties": {name: _SCORE for name in _CATEGORIES},
        },
        "top_weaknesses": {
            "type": "array",
            "minItems": 0,
            "maxItems": 3,
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": ["issue", "example", "fix"],
                "properties": {
                    "issue": {"type": "string"},
                    "example": {"type": "string"},
                    "fix": {"type": "string"},
                },
            },
        },
        "strengths": {"type": "array", "items": {"type": "string"}},
        "actionable_suggestions": {"type": "array", "items": {"type": "string"}},
    },
}

_NULLABLE_REPORT: Dict[str, Any] = {"anyOf": [LEARNING_REPORT_SCHEMA, {"type": "null"}]}

RESULT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "required": [
        "needs_clarification",
        "clarifications",
        "improved_prompt",
        "assumptions",
        "learning_report",
    ],
    "properties": {
        "needs_clarification": {"type": "boolean"},
        "clarifications": {"type": "array", "items": CLARIFICATION_ITEM_SCHEMA},
        "improved_prompt": {"type": ["string", "null"]},
        "is_already_excellent": {"type": "boolean"},
        "excellence_reason": {"type": ["string", "null"]},
        "assumptions": {"type": "array", "items": {"type": "string"}},
        "learning_report": _NULLABLE_REPORT,
    },
    "oneOf": [
        {
            "properties": {
                "needs_clarification": {"const": True},
                "clarifications": {"minItems": 1},
                "improved_prompt": {"type": "null"},
                "is_already_excellent": {"const": False},
            }
        },
        {
            "properties": {
                "needs_clarification": {"const": False},
                "clarifications": {"maxItems": 0},
                "improved_prompt": {"type": "string", "minLength": 1},
            }
        },
    ],
}

RESULT_SCHEMA_JSON = json.dumps(RESULT_SCHEMA, separators=(",", ":"))

_VALIDATOR = Draft202012Validator(RESULT_SCHEMA)


def schema_errors(payload: Any, schema: Dict[str, Any] | None = None) -> List[str]:
    """Return human-readable validation errors (empty when ``payload`` is valid)."""
    validator = _VALIDATOR if schema is None or schema is RESULT_SCHEMA else Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.absolute_path))
    return [
        f"{'/'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
        for err in errors
    ]


__all__ = [
    "CLARIFICATION_ITEM_SCHEMA",
    "LEARNING_REPORT_SCHEMA",
    "RESULT_SCHEMA",
    "RESULT_SCHEMA_JSON",
    "schema_errors",
]
