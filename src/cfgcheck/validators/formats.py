"""
Named string formats and regex patterns.

Both checks apply to string values only; other types are left to the
type check.
"""

from __future__ import annotations

import re
from typing import Any

from cfgcheck.domain.models import Finding
from cfgcheck.domain.schema import JsonSchema

_OCTET = r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)"
_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
_SEMVER_IDENT = r"[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*"

# Each pattern must match the whole value
FORMAT_PATTERNS: dict[str, re.Pattern[str]] = {
    "email": re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+"),
    "uri": re.compile(r"https?://.+", re.DOTALL),
    "date-time": re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{3})?Z?"),
    "date": re.compile(r"\d{4}-\d{2}-\d{2}"),
    "time": re.compile(r"\d{2}:\d{2}:\d{2}(?:\.\d{3})?Z?"),
    "uuid": re.compile(
        r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE
    ),
    "hostname": re.compile(rf"{_LABEL}(?:\.{_LABEL})*"),
    "ipv4": re.compile(rf"(?:{_OCTET}\.){{3}}{_OCTET}"),
    "ipv6": re.compile(r"(?:[0-9a-fA-F]{1,4}:){7}[0-9a-fA-F]{1,4}"),
    "semver": re.compile(rf"\d+\.\d+\.\d+(?:-{_SEMVER_IDENT})?(?:\+{_SEMVER_IDENT})?"),
}


def is_supported_format(name: str) -> bool:
    return name in FORMAT_PATTERNS


def matches_format(value: str, name: str) -> bool:
    """
    Test a string against a named format.

    Raises:
        KeyError: If the format is not supported.
    """
    return FORMAT_PATTERNS[name].fullmatch(value) is not None


def validate_format(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    """Check a string against ``schema.format``; unknown names are reported."""
    if not isinstance(value, str) or not schema.format:
        return []

    if not is_supported_format(schema.format):
        return [
            Finding(
                code="UNSUPPORTED_FORMAT",
                message=f"Unsupported format: {schema.format}",
                path=path,
                context={"actual": schema.format},
            )
        ]

    if matches_format(value, schema.format):
        return []
    return [
        Finding(
            code="INVALID_FORMAT",
            message=f"Value must be a valid {schema.format}",
            path=path,
            context={"actual": value, "expected": schema.format},
        )
    ]


def validate_pattern(value: Any, schema: JsonSchema, path: str) -> list[Finding]:
    """Search a string for ``schema.pattern``; an invalid regex is reported, not raised."""
    if not isinstance(value, str) or not schema.pattern:
        return []

    try:
        regex = re.compile(schema.pattern)
    except re.error:
        return [
            Finding(
                code="INVALID_PATTERN",
                message=f"Invalid pattern: {schema.pattern}",
                path=path,
                context={"actual": schema.pattern},
            )
        ]

    if regex.search(value):
        return []
    return [
        Finding(
            code="PATTERN_MISMATCH",
            message=f"Value must match pattern: {schema.pattern}",
            path=path,
            context={"actual": value, "expected": schema.pattern},
        )
    ]
