"""
Rule domain models.

Rules are declarative data, never executable code. Two tagged families exist:

- Validation rules (``structure``, ``format``, ``schema``, ``pattern``,
  ``security``) applied to a parsed document by the RuleEngine.
- Security rules (``secret``, ``permission``, ``vulnerability``,
  ``compliance``) applied to raw file text by the security evaluator.

Payloads with an unrecognised ``type`` parse to the base model so that
evaluators can report them instead of failing the whole load.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from cfgcheck.domain.exceptions import RuleError
from cfgcheck.domain.models import ComplianceStandard, SecuritySeverity, Severity
from cfgcheck.domain.schema import JsonSchema

_RULE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


# --- Security rules ---


class BaseSecurityRule(BaseModel):
    """Fields shared by every security rule."""

    model_config = _RULE_CONFIG

    id: str = Field(..., min_length=1, description="Unique rule identifier")
    name: str = Field(default="", description="Human-readable name")
    description: str = ""
    type: str = Field(..., description="Rule variant tag")
    severity: SecuritySeverity = Field(default=SecuritySeverity.MEDIUM)
    enabled: bool = Field(default=True, description="Whether the rule is active")
    remediation: str = Field(default="", description="How to fix a violation")
    references: list[str] = Field(default_factory=list)


class SecretRule(BaseSecurityRule):
    """Detects credentials in raw text with a regex."""

    type: Literal["secret"] = "secret"
    pattern: re.Pattern[str] = Field(..., description="Regex matching the secret")
    exclude_patterns: list[re.Pattern[str]] = Field(
        default_factory=list, description="Matches satisfying any of these are discarded"
    )
    examples: list[str] = Field(default_factory=list)


class PermissionRule(BaseSecurityRule):
    """Bounds the mode bits of files whose path matches a glob."""

    type: Literal["permission"] = "permission"
    file_pattern: str = Field(..., description="Glob matched against the file path")
    max_permissions: int = Field(..., description="Maximum allowed mode bits (e.g. 0o600)")
    min_permissions: int | None = Field(default=None, description="Minimum required mode bits")

    @field_validator("max_permissions", "min_permissions", mode="before")
    @classmethod
    def validate_octal(cls, v: Any) -> Any:
        # "600" and "0o600" are both octal
        if isinstance(v, str):
            return int(v.strip(), 8)
        return v


class VulnerabilityRule(BaseSecurityRule):
    """Detects an insecure configuration pattern in raw text."""

    type: Literal["vulnerability"] = "vulnerability"
    category: str = Field(default="configuration", description="Vulnerability category")
    pattern: re.Pattern[str]
    cve: str | None = None
    cvss_score: float | None = Field(default=None, ge=0, le=10)


class ComplianceRule(BaseSecurityRule):
    """A regulatory requirement satisfied when its pattern occurs in the content."""

    type: Literal["compliance"] = "compliance"
    standard: ComplianceStandard
    requirement: str = Field(..., description="Requirement identifier, e.g. PCI-DSS-3.4")
    pattern: re.Pattern[str]
    requirement_description: str = ""
    guidance: str = ""


SecurityRule = SecretRule | PermissionRule | VulnerabilityRule | ComplianceRule

SECURITY_RULE_TYPES: dict[str, type[BaseSecurityRule]] = {
    "secret": SecretRule,
    "permission": PermissionRule,
    "vulnerability": VulnerabilityRule,
    "compliance": ComplianceRule,
}


def _build_security_rule(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    model = SECURITY_RULE_TYPES.get(data.get("type", ""), BaseSecurityRule)
    return model.model_validate(data)


def parse_security_rule(data: dict[str, Any]) -> BaseSecurityRule:
    """
    Parse a security rule from plain data, dispatching on ``type``.

    Raises:
        RuleError: If the payload is invalid for its variant.
    """
    try:
        return _build_security_rule(data)
    except ValidationError as e:
        raise RuleError(f"Invalid security rule: {e}", rule_id=data.get("id")) from e


# --- Validation rules ---


class ValidationRule(BaseModel):
    """Fields shared by every document validation rule."""

    model_config = _RULE_CONFIG

    id: str = Field(..., min_length=1, description="Unique rule identifier")
    name: str = ""
    description: str = ""
    type: str = Field(..., description="Rule variant tag")
    severity: Severity = Field(
        default=Severity.ERROR, description="Result bucket for findings of this rule"
    )
    enabled: bool = True
    message: str | None = Field(default=None, description="Custom failure message")


class StructureRule(ValidationRule):
    """Required/forbidden key paths and a nesting limit."""

    type: Literal["structure"] = "structure"
    required_properties: list[str] = Field(default_factory=list)
    forbidden_properties: list[str] = Field(default_factory=list)
    max_depth: int | None = Field(default=None, ge=1)


class FormatRule(ValidationRule):
    """Named format and/or regex applied to the value at one key path."""

    type: Literal["format"] = "format"
    property_path: str | None = Field(
        default=None, description="Key path to check; whole document when unset"
    )
    format: str | None = None
    pattern: str | None = None
    required: bool = False


class SchemaRule(ValidationRule):
    """Applies a JSON-Schema-like descriptor to the document."""

    type: Literal["schema"] = "schema"
    json_schema: JsonSchema | None = Field(default=None, alias="schema")


class PatternRule(ValidationRule):
    """Regex searched in the value at ``target_path`` (or the whole document)."""

    type: Literal["pattern"] = "pattern"
    # Kept as text so an invalid regex is reported, not raised at load time
    pattern: str = Field(..., description="Regex source")
    flags: str = Field(default="", description="Regex flags: i, m, s, x")
    target_path: str | None = None


class SecurityCheckRule(ValidationRule):
    """Wraps one security rule so it can run inside a document rule set."""

    type: Literal["security"] = "security"
    rule: SerializeAsAny[BaseSecurityRule]

    @field_validator("rule", mode="before")
    @classmethod
    def validate_rule(cls, v: Any) -> Any:
        return _build_security_rule(v)


Rule = StructureRule | FormatRule | SchemaRule | PatternRule | SecurityCheckRule

RULE_TYPES: dict[str, type[ValidationRule]] = {
    "structure": StructureRule,
    "format": FormatRule,
    "schema": SchemaRule,
    "pattern": PatternRule,
    "security": SecurityCheckRule,
}


def _build_rule(data: Any) -> Any:
    if not isinstance(data, dict):
        return data
    model = RULE_TYPES.get(data.get("type", ""), ValidationRule)
    return model.model_validate(data)


def parse_rule(data: dict[str, Any]) -> ValidationRule:
    """
    Parse a validation rule from plain data, dispatching on ``type``.

    Raises:
        RuleError: If the payload is invalid for its variant.
    """
    try:
        return _build_rule(data)
    except ValidationError as e:
        raise RuleError(f"Invalid rule: {e}", rule_id=data.get("id")) from e
