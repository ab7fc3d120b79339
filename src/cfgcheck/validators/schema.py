"""
Schema validation entry points.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from pydantic import ValidationError

from cfgcheck.domain.models import Finding
from cfgcheck.domain.report import ValidationResult
from cfgcheck.domain.schema import JsonSchema, coerce_schema
from cfgcheck.validators.structure import validate_value

logger = logging.getLogger(__name__)


def validate_schema(
    data: Any,
    schema: JsonSchema | dict[str, Any] | None,
    path: str = "",
) -> ValidationResult:
    """
    Validate a parsed document against a JSON-Schema-like descriptor.

    Args:
        data: Parsed document or subtree.
        schema: Descriptor, as a model or a plain mapping.
        path: Key path of ``data`` inside its document.

    Returns:
        ValidationResult listing every violation; a missing schema yields a
        single MISSING_SCHEMA error and a malformed one a single
        INVALID_SCHEMA error.

    Example:
        >>> schema = {"type": "object", "required": ["name"]}
        >>> validate_schema({}, schema).errors[0].code
        'REQUIRED_PROPERTY_MISSING'
    """
    return SchemaValidator(schema).validate(data, path=path)


class SchemaValidator:
    """Holds one coerced schema and applies it to any number of documents."""

    def __init__(self, schema: JsonSchema | dict[str, Any] | None) -> None:
        self.schema_error: str | None = None
        try:
            self.schema = coerce_schema(schema)
        except ValidationError as e:
            self.schema = None
            self.schema_error = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: {err['msg']}"
                for err in e.errors()
            )

    def validate(self, data: Any, path: str = "") -> ValidationResult:
        start_time = time.perf_counter()

        if self.schema_error is not None:
            return ValidationResult.from_findings(
                [
                    Finding(
                        code="INVALID_SCHEMA",
                        message=f"Invalid schema: {self.schema_error}",
                        path=path,
                        context={"error": self.schema_error},
                    )
                ]
            )

        if self.schema is None:
            return ValidationResult.from_findings(
                [Finding(code="MISSING_SCHEMA", message="Schema is required", path=path)]
            )

        findings = validate_value(data, self.schema, path)
        logger.debug("Schema validation at '%s': %d finding(s)", path, len(findings))

        return ValidationResult.from_findings(
            findings,
            metadata={
                "duration_ms": (time.perf_counter() - start_time) * 1000,
                "errors": len(findings),
            },
        )
