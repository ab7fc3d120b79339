"""
Validation result models.

These models represent the output of every validator: findings bucketed by
severity, per-rule results and run metadata.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from cfgcheck.domain.models import ComplianceStatus, Finding, SecuritySeverity, Severity
from cfgcheck.domain.rules import BaseSecurityRule


class RuleResult(BaseModel):
    """Outcome of one document validation rule."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    rule_type: str
    passed: bool
    findings: int = Field(default=0, ge=0, description="Number of findings produced")


class PatternCheck(BaseModel):
    """Outcome of one pattern rule."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    passed: bool
    target_path: str | None = None
    value: str | None = Field(default=None, description="Text the pattern was searched in")
    message: str | None = None


class SecurityRuleResult(BaseModel):
    """Outcome of one security rule."""

    model_config = ConfigDict(frozen=True)

    rule: SerializeAsAny[BaseSecurityRule]
    passed: bool
    finding: Finding | None = Field(default=None, description="Set when the rule failed")
    matched_value: str | None = None
    line_number: int | None = None
    column_number: int | None = None


class ValidationResult(BaseModel):
    """
    Result of a validation run.

    ``success`` is true exactly when ``errors`` is empty, except for results
    merged non-strictly where errors are downgraded to warnings.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = Field(default=True, description="Whether validation passed")
    errors: list[Finding] = Field(default_factory=list)
    warnings: list[Finding] = Field(default_factory=list)
    info: list[Finding] = Field(default_factory=list)
    results: list[Any] = Field(default_factory=list, description="Per-rule results")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Run metadata")

    @classmethod
    def from_findings(
        cls,
        findings: list[Finding],
        results: list[Any] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> ValidationResult:
        """Bucket findings by severity; success when no error finding exists."""
        errors = [f for f in findings if f.severity == Severity.ERROR]
        return cls(
            success=not errors,
            errors=errors,
            warnings=[f for f in findings if f.severity == Severity.WARNING],
            info=[f for f in findings if f.severity == Severity.INFO],
            results=results or [],
            metadata=metadata or {},
        )

    @property
    def findings(self) -> list[Finding]:
        """All findings, errors first."""
        return [*self.errors, *self.warnings, *self.info]

    @property
    def exit_code(self) -> int:
        """Exit code for CLI (0 = passed, 1 = failed)."""
        return 0 if self.success else 1

    def findings_by_code(self, code: str) -> list[Finding]:
        """Get findings filtered by code."""
        return [f for f in self.findings if f.code == code]

    def to_json(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return self.model_dump(mode="json")


class SecuritySummary(BaseModel):
    """Rule counts of a security run; severity counts cover failed rules only."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    critical: int = Field(default=0, ge=0)
    high: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    low: int = Field(default=0, ge=0)

    @classmethod
    def from_results(cls, results: list[SecurityRuleResult]) -> SecuritySummary:
        """Create a summary from per-rule results."""
        counts = {severity: 0 for severity in SecuritySeverity}
        failed = [r for r in results if not r.passed]
        for result in failed:
            counts[result.rule.severity] += 1

        return cls(
            total=len(results),
            passed=len(results) - len(failed),
            failed=len(failed),
            critical=counts[SecuritySeverity.CRITICAL],
            high=counts[SecuritySeverity.HIGH],
            medium=counts[SecuritySeverity.MEDIUM],
            low=counts[SecuritySeverity.LOW],
        )


class SecurityValidationResult(ValidationResult):
    """Result of the security evaluator."""

    summary: SecuritySummary = Field(default_factory=SecuritySummary)
    compliance: ComplianceStatus | None = Field(
        default=None, description="Present only when compliance rules ran"
    )
    compliance_by_standard: list[ComplianceStatus] = Field(
        default_factory=list, description="One status per evaluated standard"
    )

    @property
    def valid(self) -> bool:
        return self.success

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump(mode="json")
        if self.compliance is None:
            data.pop("compliance")
        if not self.compliance_by_standard:
            data.pop("compliance_by_standard")
        return data
