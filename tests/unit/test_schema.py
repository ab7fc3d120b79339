"""
Unit tests for the schema validation pipeline.
"""

from __future__ import annotations

from typing import Any

import pytest

from cfgcheck.domain.schema import JsonSchema
from cfgcheck.validators.schema import SchemaValidator, validate_schema
from cfgcheck.validators.types import get_actual_type, matches_type


def _codes(data: Any, schema: dict[str, Any]) -> list[str]:
    return [f.code for f in validate_schema(data, schema).errors]


class TestRequiredProperties:
    """Tests for required members."""

    def test_missing_required_property(self) -> None:
        """An empty object should report the missing member once."""
        schema = {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string"}},
        }

        result = validate_schema({}, schema)

        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].code == "REQUIRED_PROPERTY_MISSING"
        assert result.errors[0].path == "name"

    def test_none_counts_as_missing(self) -> None:
        """A None member should be reported as missing."""
        assert _codes({"name": None}, {"required": ["name"]}) == ["REQUIRED_PROPERTY_MISSING"]

    def test_nested_path(self, service_schema: dict[str, Any]) -> None:
        """Nested findings should carry dotted paths."""
        result = validate_schema({"app": {"name": "billing"}}, service_schema)

        assert [(f.code, f.path) for f in result.errors] == [
            ("REQUIRED_PROPERTY_MISSING", "app.port")
        ]


class TestTypes:
    """Tests for type checks."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "null"),
            (True, "boolean"),
            (3, "integer"),
            (3.5, "number"),
            ("x", "string"),
            ([], "array"),
            ({}, "object"),
        ],
    )
    def test_actual_type(self, value: Any, expected: str) -> None:
        """Should name JSON types."""
        assert get_actual_type(value) == expected

    def test_number_accepts_integers(self) -> None:
        """Integers are numbers; whole floats are integers; booleans are neither."""
        assert matches_type(3, "number")
        assert matches_type(3.0, "integer")
        assert not matches_type(3.5, "integer")
        assert not matches_type(True, "number")

    def test_type_mismatch_message(self) -> None:
        """Should report expected and actual types."""
        result = validate_schema("text", {"type": ["integer", "boolean"]})

        assert result.errors[0].code == "INVALID_TYPE"
        assert result.errors[0].message == "Expected integer or boolean, got string"

    def test_absent_member_passes_type_check(self) -> None:
        """Absent optional members should not be type checked."""
        schema = {"type": "object", "properties": {"port": {"type": "integer"}}}

        assert validate_schema({}, schema).success


class TestValueConstraints:
    """Tests for format, pattern, length, range and enum checks."""

    def test_all_checks_run(self) -> None:
        """A single value can fail several checks at once."""
        schema = {"type": "string", "format": "email", "minLength": 10, "pattern": "^admin"}

        assert _codes("x@y", schema) == ["INVALID_FORMAT", "PATTERN_MISMATCH", "MIN_LENGTH_ERROR"]

    @pytest.mark.parametrize(
        ("fmt", "valid", "invalid"),
        [
            ("email", "ops@example.com", "not-an-email"),
            ("uri", "https://example.com/x", "ftp://example.com"),
            ("date", "2024-02-29", "29/02/2024"),
            ("date-time", "2024-02-29T10:00:00.000Z", "2024-02-29 10:00"),
            ("uuid", "123E4567-E89B-12D3-A456-426614174000", "1234"),
            ("ipv4", "10.0.0.255", "10.0.0.256"),
            ("semver", "1.2.3-rc.1+build.5", "1.2"),
        ],
    )
    def test_formats(self, fmt: str, valid: str, invalid: str) -> None:
        """Should accept valid and reject invalid values per format."""
        schema = {"type": "string", "format": fmt}

        assert _codes(valid, schema) == []
        assert _codes(invalid, schema) == ["INVALID_FORMAT"]

    def test_unsupported_format(self) -> None:
        """Unknown formats should be reported."""
        assert _codes("x", {"format": "credit-card"}) == ["UNSUPPORTED_FORMAT"]

    def test_invalid_pattern_is_reported(self) -> None:
        """A broken regex should become a finding, not an exception."""
        assert _codes("x", {"pattern": "(unclosed"}) == ["INVALID_PATTERN"]

    def test_length_bounds(self) -> None:
        """Should enforce string length bounds."""
        schema = {"minLength": 2, "maxLength": 4}

        assert _codes("a", schema) == ["MIN_LENGTH_ERROR"]
        assert _codes("abcde", schema) == ["MAX_LENGTH_ERROR"]
        assert _codes("abc", schema) == []

    def test_number_bounds(self) -> None:
        """Should enforce numeric bounds and skip booleans."""
        schema = {"minimum": 1, "maximum": 10}

        assert _codes(0, schema) == ["MINIMUM_ERROR"]
        assert _codes(10.5, schema) == ["MAXIMUM_ERROR"]
        assert _codes(True, schema) == []

    def test_enum_is_strict(self) -> None:
        """Enum membership should not confuse booleans with integers."""
        schema = {"enum": [1, "two"]}

        assert _codes(1, schema) == []
        assert _codes(1.0, schema) == []
        assert _codes(True, schema) == ["INVALID_ENUM"]

    def test_enum_message(self) -> None:
        """Should list allowed values."""
        result = validate_schema("prod", {"enum": ["dev", "staging", 3]})

        assert result.errors[0].message == "Value must be one of: dev, staging, 3"


class TestObjectsAndArrays:
    """Tests for member and element recursion."""

    def test_additional_properties_false(self, service_schema: dict[str, Any]) -> None:
        """Undeclared members should be rejected."""
        data = {"app": {"name": "billing", "port": 80, "extra": 1}}

        result = validate_schema(data, service_schema)

        assert [(f.code, f.path) for f in result.errors] == [
            ("ADDITIONAL_PROPERTY_NOT_ALLOWED", "app.extra")
        ]

    def test_additional_properties_schema(self) -> None:
        """A schema for additional members should validate them."""
        schema = {"type": "object", "additionalProperties": {"type": "integer"}}

        assert _codes({"a": 1, "b": "x"}, schema) == ["INVALID_TYPE"]

    def test_array_items(self) -> None:
        """Element findings should carry indexed paths."""
        result = validate_schema(
            {"ports": [80, "x"]},
            {"properties": {"ports": {"type": "array", "items": {"type": "integer"}}}},
        )

        assert [f.path for f in result.errors] == ["ports[1]"]

    def test_tuple_items_reuse_last_schema(self) -> None:
        """Elements past the tuple should use its last schema."""
        schema = {"type": "array", "items": [{"type": "string"}, {"type": "integer"}]}

        result = validate_schema(["a", 1, 2, "x"], schema)

        assert [f.path for f in result.errors] == ["[3]"]

    def test_object_keywords_without_type(self) -> None:
        """Object keywords should apply even when no type is declared."""
        assert _codes({}, {"required": ["a"]}) == ["REQUIRED_PROPERTY_MISSING"]

    def test_valid_document(self, service_schema: dict[str, Any]) -> None:
        """A conforming document should pass."""
        assert validate_schema({"app": {"name": "billing", "port": 443}}, service_schema).success


class TestSchemaValidator:
    """Tests for the SchemaValidator entry point."""

    def test_missing_schema(self) -> None:
        """A missing schema should be a single error."""
        result = validate_schema({}, None)

        assert [f.code for f in result.errors] == ["MISSING_SCHEMA"]
        assert result.errors[0].message == "Schema is required"

    def test_malformed_schema(self) -> None:
        """A schema that cannot be loaded should be a single error, not an exception."""
        result = validate_schema({"a": 1}, {"type": "object", "required": "a"})

        assert [f.code for f in result.errors] == ["INVALID_SCHEMA"]
        assert result.errors[0].message.startswith("Invalid schema: required")
        assert not result.success

    def test_malformed_schema_reused(self) -> None:
        """A validator built from a malformed schema should report it on every call."""
        validator = SchemaValidator({"properties": {"port": {"minimum": "low"}}})

        for data in ({}, {"port": 1}):
            assert [f.code for f in validator.validate(data).errors] == ["INVALID_SCHEMA"]

    def test_accepts_models_and_aliases(self) -> None:
        """Snake-case and camelCase keywords should both load."""
        by_alias = JsonSchema.model_validate({"minLength": 2})
        by_name = JsonSchema(min_length=2)

        assert by_alias == by_name
        assert SchemaValidator(by_alias).validate("a").errors[0].code == "MIN_LENGTH_ERROR"

    def test_root_path_prefix(self) -> None:
        """Should prefix finding paths with the given root."""
        result = validate_schema({}, {"required": ["a"]}, path="service")

        assert result.errors[0].path == "service.a"
