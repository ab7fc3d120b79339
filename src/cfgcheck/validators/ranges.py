"""
Length and numeric range checks.

Each bound fires only when declared and when the value has the matching
runtime type; type mismatches are the type check's concern.
"""

from __future__ import annotations

from typing import Any

from cfgcheck.domain.models import Finding
from cfgcheck.domain.schema import JsonSchema


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_string_length(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    if not isinstance(value, str):
        return []

    findings: list[Finding] = []
    length = len(value)

    if schema.min_length is not None and length < schema.min_length:
        findings.append(
            Finding(
                code="MIN_LENGTH_ERROR",
                message=f"String length must be at least {schema.min_length}",
                path=path,
                context={"actual": length, "expected": schema.min_length},
            )
        )

    if schema.max_length is not None and length > schema.max_length:
        findings.append(
            Finding(
                code="MAX_LENGTH_ERROR",
                message=f"String length must be at most {schema.max_length}",
                path=path,
                context={"actual": length, "expected": schema.max_length},
            )
        )

    return findings


def validate_number_range(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    if not _is_number(value):
        return []

    findings: list[Finding] = []

    if schema.minimum is not None and value < schema.minimum:
        findings.append(
            Finding(
                code="MINIMUM_ERROR",
                message=f"Value must be at least {schema.minimum}",
                path=path,
                context={"actual": value, "expected": schema.minimum},
            )
        )

    if schema.maximum is not None and value > schema.maximum:
        findings.append(
            Finding(
                code="MAXIMUM_ERROR",
                message=f"Value must be at most {schema.maximum}",
                path=path,
                context={"actual": value, "expected": schema.maximum},
            )
        )

    return findings
