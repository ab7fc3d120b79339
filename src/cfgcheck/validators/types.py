"""
Type checks for the schema pipeline.
"""

from __future__ import annotations

from typing import Any

from cfgcheck.domain.models import Finding
from cfgcheck.domain.schema import JsonSchema
from cfgcheck.engine.paths import MISSING


def get_actual_type(value: Any) -> str:
    """JSON type name of a parsed value (``integer`` for whole ints)."""
    if value is None:
        return "null"
    # bool is an int subclass; it is never a number here
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def matches_type(value: Any, expected: str) -> bool:
    """Whether ``value`` satisfies one JSON type name."""
    actual = get_actual_type(value)
    if expected == "number":
        return actual in ("number", "integer")
    if expected == "integer":
        return actual == "integer" or (actual == "number" and float(value).is_integer())
    return actual == expected


def validate_type(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    """
    Check ``value`` against ``schema.type``.

    An absent value always passes (required checks report it); ``None``
    fails unless the declared type is ``null``.
    """
    expected = schema.declared_types
    if not expected or value is MISSING:
        return []

    if any(matches_type(value, name) for name in expected):
        return []

    expected_label = " or ".join(expected)
    actual = get_actual_type(value)
    return [
        Finding(
            code="INVALID_TYPE",
            message=f"Expected {expected_label}, got {actual}",
            path=path,
            context={"actual": actual, "expected": expected_label},
        )
    ]
