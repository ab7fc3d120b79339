"""
Domain models for cfgcheck.

This module contains the core data structures shared by every validator:
findings, loaded configuration documents and the per-match records produced
by the security scanners. All models are Pydantic v2 and immutable once built.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Severity(str, Enum):
    """Result bucket a finding is reported in."""

    ERROR = "error"  # Blocks success
    WARNING = "warning"  # Reported, never blocks
    INFO = "info"  # Informational only (e.g. empty values)

    def _get_order(self) -> int:
        order = [Severity.INFO, Severity.WARNING, Severity.ERROR]
        return order.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self._get_order() < other._get_order()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self._get_order() >= other._get_order()


class SecuritySeverity(str, Enum):
    """Severity of a security rule, aligned with CVSS v3.1 qualitative ratings."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def _get_order(self) -> int:
        order = [
            SecuritySeverity.LOW,
            SecuritySeverity.MEDIUM,
            SecuritySeverity.HIGH,
            SecuritySeverity.CRITICAL,
        ]
        return order.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self._get_order() < other._get_order()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self._get_order() <= other._get_order()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self._get_order() > other._get_order()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SecuritySeverity):
            return NotImplemented
        return self._get_order() >= other._get_order()

    def to_severity(self) -> Severity:
        """Map to the result bucket: critical/high block, medium warns, low informs."""
        if self in (SecuritySeverity.CRITICAL, SecuritySeverity.HIGH):
            return Severity.ERROR
        if self == SecuritySeverity.MEDIUM:
            return Severity.WARNING
        return Severity.INFO


class ComplianceStandard(str, Enum):
    """Regulatory standards with built-in requirement tables (NIST/CIS: custom rules only)."""

    PCI_DSS = "PCI-DSS"
    GDPR = "GDPR"
    HIPAA = "HIPAA"
    SOX = "SOX"
    ISO27001 = "ISO27001"
    NIST = "NIST"
    CIS = "CIS"


class Finding(BaseModel):
    """
    A single error, warning or info entry produced by a validator.

    ``code`` is a stable string constant (``MISSING_KEY``, ``INVALID_TYPE``,
    ``SECURITY_<RULEID>``...) consumed by reporters and CI gating.
    """

    model_config = ConfigDict(frozen=True)

    code: str = Field(..., description="Stable finding code", min_length=1)
    message: str = Field(..., description="Human-readable message")
    severity: Severity = Field(default=Severity.ERROR, description="Result bucket")
    path: str | None = Field(default=None, description="Key path the finding refers to")
    context: dict[str, Any] = Field(
        default_factory=dict, description="Structured details for reporters"
    )

    def __hash__(self) -> int:
        return hash((self.code, self.path, self.message))


class ConfigDocument(BaseModel):
    """
    A configuration file already parsed into an in-memory tree.

    Owned by the loader and consumed read-only by the validators.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path the document was loaded from")
    content: dict[Any, Any] = Field(
        default_factory=dict, description="Parsed tree; YAML keys may be ints or bools"
    )
    format: Literal["yaml", "json"] = Field(default="yaml", description="Source format")
    raw_text: str | None = Field(
        default=None, description="Original file text, scanned by security rules"
    )
    permissions: int | None = Field(
        default=None, description="File mode bits (e.g. 0o644) when known"
    )

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v: Any) -> Any:
        # An empty YAML file parses to None
        if v is None:
            return {}
        return v


class SecurityContext(BaseModel):
    """Where the scanned content came from."""

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(default="", description="File being validated")
    permissions: int | None = Field(default=None, description="File mode bits if available")


class SecretMatch(BaseModel):
    """A potential secret found in raw text. Never carries the unmasked value."""

    model_config = ConfigDict(frozen=True)

    secret_type: str = Field(..., description="Name of the rule that matched")
    rule_id: str = Field(..., description="ID of the rule that matched")
    masked_value: str = Field(..., description="Matched text with the middle masked")
    confidence: int = Field(..., ge=0, le=100, description="Heuristic confidence 0-100")
    severity: SecuritySeverity = Field(..., description="Severity derived from confidence")
    context: str = Field(default="", description="Text around the match")
    line_number: int = Field(..., ge=1)
    column_number: int = Field(..., ge=1)


class PermissionCheck(BaseModel):
    """Outcome of checking one file against one permission rule."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    rule_id: str
    current_permissions: int | None = Field(
        default=None, description="Actual mode bits, None when unavailable"
    )
    required_permissions: int = Field(..., description="Maximum allowed mode bits")
    valid: bool
    message: str = ""


class VulnerabilityMatch(BaseModel):
    """An insecure configuration pattern found in raw text."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(..., description="Vulnerability category")
    rule_id: str
    description: str = ""
    cve: str | None = None
    cvss_score: float | None = None
    remediation: str = ""
    references: list[str] = Field(default_factory=list)
    matched_value: str = ""
    line_number: int = Field(..., ge=1)
    column_number: int = Field(..., ge=1)


class ComplianceStatus(BaseModel):
    """Pass/fail verdict for one compliance standard."""

    model_config = ConfigDict(frozen=True)

    standard: ComplianceStandard
    passed: bool
    failed_requirements: list[str] = Field(default_factory=list)
