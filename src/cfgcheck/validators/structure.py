"""
Recursive value validation: objects, arrays, enums and the per-value dispatcher.
"""

from __future__ import annotations

import json
from typing import Any

from cfgcheck.domain.models import Finding
from cfgcheck.domain.schema import JsonSchema
from cfgcheck.engine.paths import MISSING, join_path
from cfgcheck.validators.formats import validate_format, validate_pattern
from cfgcheck.validators.ranges import validate_number_range, validate_string_length
from cfgcheck.validators.types import get_actual_type, validate_type


def validate_value(value: Any, schema: JsonSchema, path: str = "") -> list[Finding]:
    """
    Validate one value against a schema, recursing into members and elements.

    Every check runs; a single value can yield several findings at once.

    Args:
        value: Parsed value, or ``MISSING`` when the member is absent.
        schema: Schema for this value.
        path: Key path of the value, used in findings.

    Returns:
        All findings for the value and its descendants.
    """
    return [
        *validate_type(value, schema, path),
        *validate_format(value, schema, path),
        *validate_pattern(value, schema, path),
        *validate_string_length(value, schema, path),
        *validate_number_range(value, schema, path),
        *validate_enum(value, schema, path),
        *validate_object(value, schema, path),
        *validate_array(value, schema, path),
    ]


def _applies_to(schema: JsonSchema, type_name: str, *keywords: Any) -> bool:
    declared = schema.declared_types
    if declared:
        return type_name in declared
    return any(keyword is not None for keyword in keywords)


def validate_object(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    """Required, declared and additional members of a mapping."""
    if not isinstance(value, dict):
        return []
    if not _applies_to(
        schema, "object", schema.properties, schema.required, schema.additional_properties
    ):
        return []

    members = {str(key): member for key, member in value.items()}
    declared = schema.properties or {}

    findings = validate_required_properties(members, schema, path)

    for name, member_schema in declared.items():
        findings.extend(
            validate_value(members.get(name, MISSING), member_schema, join_path(path, name))
        )

    findings.extend(_validate_additional_properties(members, schema, path))
    return findings


def validate_required_properties(
    value: dict[str, Any], schema: JsonSchema, path: str
) -> list[Finding]:
    """An absent or ``None`` member listed in ``required`` is missing."""
    findings: list[Finding] = []
    for name in schema.required or []:
        if value.get(name) is None:
            findings.append(
                Finding(
                    code="REQUIRED_PROPERTY_MISSING",
                    message=f"Required property '{name}' is missing",
                    path=join_path(path, name),
                    context={"expected": name},
                )
            )
    return findings


def _validate_additional_properties(
    value: dict[str, Any], schema: JsonSchema, path: str
) -> list[Finding]:
    additional = schema.additional_properties
    if additional is None or additional is True:
        return []

    declared = schema.properties or {}
    undeclared = [name for name in value if name not in declared]

    if additional is False:
        return [
            Finding(
                code="ADDITIONAL_PROPERTY_NOT_ALLOWED",
                message=f"Additional property '{name}' is not allowed",
                path=join_path(path, name),
                context={"actual": name},
            )
            for name in undeclared
        ]

    findings: list[Finding] = []
    for name in undeclared:
        findings.extend(validate_value(value[name], additional, join_path(path, name)))
    return findings


def validate_array(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    """
    Validate array elements against ``items``.

    A list of schemas validates by position; elements past the end of the
    tuple reuse its last schema.
    """
    if not isinstance(value, list) or schema.items is None:
        return []
    if not _applies_to(schema, "array", schema.items):
        return []

    findings: list[Finding] = []
    items = schema.items

    if isinstance(items, list):
        if not items:
            return []
        for i, element in enumerate(value):
            element_schema = items[i] if i < len(items) else items[-1]
            findings.extend(validate_value(element, element_schema, f"{path}[{i}]"))
    else:
        for i, element in enumerate(value):
            findings.extend(validate_value(element, items, f"{path}[{i}]"))

    return findings


def _strict_equals(left: Any, right: Any) -> bool:
    numeric = ("number", "integer")
    left_type, right_type = get_actual_type(left), get_actual_type(right)
    if left_type in numeric and right_type in numeric:
        return left == right
    return left_type == right_type and left == right


def _format_enum_value(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value, default=str)


def validate_enum(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    """Membership by strict equality (``True`` never equals ``1``)."""
    if schema.enum is None or value is MISSING:
        return []

    if any(_strict_equals(value, allowed) for allowed in schema.enum):
        return []

    allowed = ", ".join(_format_enum_value(v) for v in schema.enum)
    return [
        Finding(
            code="INVALID_ENUM",
            message=f"Value must be one of: {allowed}",
            path=path,
            context={"actual": value, "expected": list(schema.enum)},
        )
    ]
