"""
JSON-Schema-like descriptor.

Only the keywords the validation pipeline understands are modelled;
unknown keywords (``$schema``, ``title``, ``description``...) are ignored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JsonSchema(BaseModel):
    """Recursive schema descriptor applied to a configuration value."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    type: str | list[str] | None = Field(default=None, description="Expected type name(s)")
    properties: dict[str, JsonSchema] | None = Field(
        default=None, description="Schemas of declared object members"
    )
    required: list[str] | None = Field(default=None, description="Required member names")
    additional_properties: bool | JsonSchema | None = Field(
        default=None, description="False forbids undeclared members"
    )
    items: JsonSchema | list[JsonSchema] | None = Field(
        default=None, description="Element schema, or per-position tuple schemas"
    )
    enum: list[Any] | None = Field(default=None, description="Allowed values")
    pattern: str | None = Field(default=None, description="Regex a string must match")
    minimum: int | float | None = None
    maximum: int | float | None = None
    min_length: int | None = Field(default=None, ge=0)
    max_length: int | None = Field(default=None, ge=0)
    format: str | None = Field(default=None, description="Named string format")

    @property
    def declared_types(self) -> list[str]:
        """The ``type`` keyword as a list (empty when unset)."""
        if self.type is None:
            return []
        if isinstance(self.type, str):
            return [self.type]
        return list(self.type)


def coerce_schema(schema: JsonSchema | dict[str, Any] | None) -> JsonSchema | None:
    """Accept a plain mapping wherever a schema is expected."""
    if schema is None or isinstance(schema, JsonSchema):
        return schema
    return JsonSchema.model_validate(schema)
