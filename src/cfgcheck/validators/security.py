"""
Security rule evaluator.

Dispatches each enabled security rule to its sub-evaluator (secrets,
permissions, vulnerabilities, compliance) and folds the outcomes into a
SecurityValidationResult.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from cfgcheck.domain.models import ComplianceStandard, ComplianceStatus, Finding, SecurityContext
from cfgcheck.domain.report import SecurityRuleResult, SecuritySummary, SecurityValidationResult
from cfgcheck.domain.rules import (
    BaseSecurityRule,
    ComplianceRule,
    PermissionRule,
    SecretRule,
    VulnerabilityRule,
)
from cfgcheck.validators.compliance import check_compliance
from cfgcheck.validators.permissions import format_permissions, validate_permissions
from cfgcheck.validators.secrets import detect_secrets
from cfgcheck.validators.vulnerabilities import scan_vulnerabilities

logger = logging.getLogger(__name__)


def validate_security(
    content: str,
    rules: Sequence[BaseSecurityRule],
    context: SecurityContext | None = None,
) -> SecurityValidationResult:
    """
    Evaluate security rules against raw file text.

    Args:
        content: Raw file text.
        rules: Security rules of any variant; disabled rules are skipped.
        context: File path and permissions of the text's source.

    Returns:
        SecurityValidationResult. Failed rules yield ``SECURITY_<RULE ID>``
        findings in the bucket their severity maps to. Compliance rules are
        rolled up per standard into ``compliance_by_standard``, in first-seen
        order; ``compliance`` is the first of those and is set only when
        compliance rules were evaluated.

    Example:
        >>> result = validate_security(text, DEFAULT_SECURITY_RULES, SecurityContext(file_path=".env"))
        >>> result.summary.critical
        0
    """
    if not content or not content.strip() or not rules:
        return SecurityValidationResult()

    start_time = time.perf_counter()
    context = context or SecurityContext()

    results = [_evaluate_rule(content, rule, context) for rule in rules if rule.enabled]
    findings = [r.finding for r in results if r.finding is not None]

    base = SecurityValidationResult.from_findings(findings)
    summary = SecuritySummary.from_results(results)
    compliance = _compliance_by_standard(results)
    logger.debug(
        "Security rules for %s: %d passed, %d failed",
        context.file_path or "<text>",
        summary.passed,
        summary.failed,
    )

    return SecurityValidationResult(
        success=base.success,
        errors=base.errors,
        warnings=base.warnings,
        info=base.info,
        results=results,
        summary=summary,
        compliance=compliance[0] if compliance else None,
        compliance_by_standard=compliance,
        metadata={
            "duration_ms": (time.perf_counter() - start_time) * 1000,
            "file": context.file_path,
        },
    )


def _evaluate_rule(
    content: str, rule: BaseSecurityRule, context: SecurityContext
) -> SecurityRuleResult:
    match rule:
        case SecretRule():
            return _evaluate_secret(content, rule, context)
        case PermissionRule():
            return _evaluate_permission(rule, context)
        case VulnerabilityRule():
            return _evaluate_vulnerability(content, rule, context)
        case ComplianceRule():
            return _evaluate_compliance(content, rule, context)
        case _:
            return _failed(rule, context, f"Unknown rule type: {rule.type}")


def _evaluate_secret(
    content: str, rule: SecretRule, context: SecurityContext
) -> SecurityRuleResult:
    secrets = detect_secrets(content, [rule], context)
    if not secrets:
        return SecurityRuleResult(rule=rule, passed=True)

    first = secrets[0]
    return _failed(
        rule,
        context,
        f"Found {len(secrets)} potential secrets",
        matched_value=first.masked_value,
        line_number=first.line_number,
        column_number=first.column_number,
    )


def _evaluate_permission(rule: PermissionRule, context: SecurityContext) -> SecurityRuleResult:
    checks = validate_permissions(context.file_path, context.permissions, [rule])
    failed = next((check for check in checks if not check.valid), None)
    if failed is None:
        return SecurityRuleResult(rule=rule, passed=True)

    current = failed.current_permissions
    return _failed(
        rule,
        context,
        "Invalid file permissions",
        matched_value=str(current) if current is not None else None,
        extra={
            "current_permissions": format_permissions(current) if current is not None else None,
            "max_permissions": format_permissions(rule.max_permissions),
            "reason": failed.message,
        },
    )


def _evaluate_vulnerability(
    content: str, rule: VulnerabilityRule, context: SecurityContext
) -> SecurityRuleResult:
    vulnerabilities = scan_vulnerabilities(content, [rule])
    if not vulnerabilities:
        return SecurityRuleResult(rule=rule, passed=True)

    first = vulnerabilities[0]
    return _failed(
        rule,
        context,
        f"Found {len(vulnerabilities)} vulnerabilities",
        matched_value=first.matched_value,
        line_number=first.line_number,
        column_number=first.column_number,
        extra={"type": first.type, "remediation": rule.remediation},
    )


def _evaluate_compliance(
    content: str, rule: ComplianceRule, context: SecurityContext
) -> SecurityRuleResult:
    status = check_compliance(content, [rule])
    if status.passed:
        return SecurityRuleResult(rule=rule, passed=True)

    return _failed(
        rule,
        context,
        f"Compliance failed: {', '.join(status.failed_requirements)}",
        extra={"standard": rule.standard.value, "requirement": rule.requirement},
    )


def _failed(
    rule: BaseSecurityRule,
    context: SecurityContext,
    message: str,
    matched_value: str | None = None,
    line_number: int | None = None,
    column_number: int | None = None,
    extra: dict | None = None,
) -> SecurityRuleResult:
    finding_context = {
        "rule_id": rule.id,
        "matched_value": matched_value,
        "file": context.file_path,
        **(extra or {}),
    }
    if line_number is not None:
        finding_context["line"] = line_number
        finding_context["column"] = column_number

    return SecurityRuleResult(
        rule=rule,
        passed=False,
        finding=Finding(
            code=f"SECURITY_{rule.id.upper()}",
            message=message,
            severity=rule.severity.to_severity(),
            context=finding_context,
        ),
        matched_value=matched_value,
        line_number=line_number,
        column_number=column_number,
    )


def _compliance_by_standard(results: list[SecurityRuleResult]) -> list[ComplianceStatus]:
    grouped: dict[ComplianceStandard, list[SecurityRuleResult]] = {}
    for result in results:
        if isinstance(result.rule, ComplianceRule):
            grouped.setdefault(result.rule.standard, []).append(result)

    return [
        ComplianceStatus(
            standard=standard,
            passed=all(r.passed for r in group),
            failed_requirements=[r.rule.requirement for r in group if not r.passed],
        )
        for standard, group in grouped.items()
    ]
