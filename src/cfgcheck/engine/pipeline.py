"""
Rule engine. Applies document validation rules and merges results.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Sequence
from typing import Any

from cfgcheck.domain.models import ConfigDocument, Finding, SecurityContext, Severity
from cfgcheck.domain.report import RuleResult, ValidationResult
from cfgcheck.domain.rules import (
    FormatRule,
    PatternRule,
    SchemaRule,
    SecurityCheckRule,
    StructureRule,
    ValidationRule,
)
from cfgcheck.engine.paths import MISSING, calculate_depth, get_nested_value, has_key_path
from cfgcheck.validators.formats import is_supported_format, matches_format
from cfgcheck.validators.patterns import stringify, validate_patterns
from cfgcheck.validators.security import validate_security
from cfgcheck.validators.structure import validate_value

logger = logging.getLogger(__name__)


def validate_document(
    document: ConfigDocument,
    rules: Sequence[ValidationRule],
) -> ValidationResult:
    """
    Apply validation rules to one loaded document.

    Args:
        document: Parsed document; its raw text feeds security rules.
        rules: Rules of any variant.

    Returns:
        ValidationResult for the document.
    """
    engine = RuleEngine(rules=rules)
    context = SecurityContext(file_path=document.path, permissions=document.permissions)
    return engine.validate(document.content, context=context, raw_text=document.raw_text)


class RuleEngine:
    """
    Executes validation rules against a parsed document.

    Every rule runs independently: a broken rule yields a finding and never
    stops the rest.
    """

    def __init__(self, rules: Sequence[ValidationRule] | None = None) -> None:
        """
        Initialize the rule engine.

        Args:
            rules: Rules to execute when ``validate`` is given none.
        """
        self.rules = list(rules) if rules is not None else []

    def validate(
        self,
        data: Any,
        rules: Sequence[ValidationRule] | None = None,
        context: SecurityContext | None = None,
        raw_text: str | None = None,
    ) -> ValidationResult:
        """
        Validate ``data`` with all configured rules.

        Args:
            data: Parsed document.
            rules: Rules to apply instead of the engine's own.
            context: Source file details for security rules.
            raw_text: Source text for security rules; ``data`` rendered as
                JSON when omitted.

        Returns:
            ValidationResult with findings bucketed by each rule's severity
            and one RuleResult per executed rule.
        """
        start_time = time.perf_counter()
        rules = list(rules) if rules is not None else self.rules
        context = context or SecurityContext()

        findings: list[Finding] = []
        outcomes: list[RuleResult] = []
        skipped: list[str] = []

        for rule in rules:
            if not rule.enabled:
                skipped.append(rule.id)
                continue

            try:
                rule_findings = self._apply_rule(rule, data, context, raw_text)
            except Exception as e:
                logger.exception("Rule %s failed", rule.id)
                rule_findings = [
                    Finding(
                        code="RULE_EXECUTION_ERROR",
                        message=f"Rule {rule.id} failed: {e}",
                        context={"rule_id": rule.id},
                    )
                ]

            findings.extend(rule_findings)
            outcomes.append(
                RuleResult(
                    rule_id=rule.id,
                    rule_type=rule.type,
                    passed=not any(f.severity == Severity.ERROR for f in rule_findings),
                    findings=len(rule_findings),
                )
            )

        passed = sum(1 for outcome in outcomes if outcome.passed)
        logger.debug("Applied %d rule(s): %d passed", len(outcomes), passed)

        return ValidationResult.from_findings(
            findings,
            results=outcomes,
            metadata={
                "duration_ms": (time.perf_counter() - start_time) * 1000,
                "file": context.file_path or None,
                "rules_checked": len(outcomes),
                "rules_passed": passed,
                "rules_failed": len(outcomes) - passed,
                "rules_skipped": skipped,
            },
        )

    def _apply_rule(
        self,
        rule: ValidationRule,
        data: Any,
        context: SecurityContext,
        raw_text: str | None,
    ) -> list[Finding]:
        if data is None:
            return [
                _finding(rule, "NO_DATA", "Data cannot be null or undefined")
            ]

        match rule:
            case StructureRule():
                return self._apply_structure(rule, data)
            case FormatRule():
                return self._apply_format(rule, data)
            case SchemaRule():
                return self._apply_schema(rule, data)
            case PatternRule():
                return validate_patterns(data, [rule], file_path=context.file_path or None).findings
            case SecurityCheckRule():
                content = raw_text if raw_text is not None else stringify(data)
                return validate_security(content, [rule.rule], context).findings
            case _:
                return [
                    _finding(
                        rule,
                        "UNKNOWN_RULE_TYPE",
                        f"Rule type '{rule.type}' is not supported",
                        severity=Severity.ERROR,
                    )
                ]

    def _apply_structure(self, rule: StructureRule, data: Any) -> list[Finding]:
        if not isinstance(data, dict):
            return [
                _finding(rule, "INVALID_DATA_STRUCTURE", "Structure validation requires an object")
            ]

        findings: list[Finding] = []

        for prop in rule.required_properties:
            if not has_key_path(data, prop):
                findings.append(
                    _finding(
                        rule, "MISSING_REQUIRED_PROPERTY", f"Required property '{prop}' is missing", prop
                    )
                )

        for prop in rule.forbidden_properties:
            if has_key_path(data, prop):
                findings.append(
                    _finding(rule, "FORBIDDEN_PROPERTY", f"Property '{prop}' is not allowed", prop)
                )

        if rule.max_depth is not None:
            depth = calculate_depth(data)
            if depth > rule.max_depth:
                findings.append(
                    _finding(
                        rule,
                        "EXCESSIVE_NESTING",
                        f"Object depth {depth} exceeds maximum allowed depth {rule.max_depth}",
                    )
                )

        return findings

    def _apply_format(self, rule: FormatRule, data: Any) -> list[Finding]:
        path = rule.property_path
        value = get_nested_value(data, path) if path else data

        if value is MISSING or value is None:
            if rule.required:
                return [
                    _finding(
                        rule,
                        "REQUIRED_FIELD_MISSING",
                        f"Required field '{path or 'root'}' is missing",
                        path,
                    )
                ]
            return []

        text = stringify(value)
        findings: list[Finding] = []

        if rule.format:
            if not is_supported_format(rule.format):
                findings.append(
                    _finding(rule, "UNSUPPORTED_FORMAT", f"Unsupported format: {rule.format}", path)
                )
            elif not matches_format(text, rule.format):
                findings.append(
                    _finding(
                        rule,
                        "INVALID_FORMAT",
                        rule.message
                        or f"Value '{text}' does not match required format '{rule.format}'",
                        path,
                    )
                )

        if rule.pattern:
            try:
                regex = re.compile(rule.pattern)
            except re.error:
                findings.append(
                    _finding(rule, "INVALID_PATTERN", f"Invalid pattern: {rule.pattern}", path)
                )
            else:
                if not regex.search(text):
                    findings.append(
                        _finding(
                            rule,
                            "PATTERN_MISMATCH",
                            rule.message
                            or f"Value '{text}' does not match required pattern '{rule.pattern}'",
                            path,
                        )
                    )

        return findings

    def _apply_schema(self, rule: SchemaRule, data: Any) -> list[Finding]:
        if rule.json_schema is None:
            return [
                _finding(
                    rule, "NO_SCHEMA_DEFINED", "Schema validation enabled but no schema provided"
                )
            ]

        return [
            finding.model_copy(
                update={
                    "severity": rule.severity,
                    "context": {**finding.context, "rule_id": rule.id},
                }
            )
            for finding in validate_value(data, rule.json_schema, "")
        ]


def _finding(
    rule: ValidationRule,
    code: str,
    message: str,
    path: str | None = None,
    severity: Severity | None = None,
) -> Finding:
    return Finding(
        code=code,
        message=message,
        severity=severity or rule.severity,
        path=path,
        context={"rule_id": rule.id},
    )


def merge_results(
    results: Sequence[ValidationResult],
    strict: bool = True,
) -> ValidationResult:
    """
    Fold several results into one.

    Args:
        results: Results to merge, in reporting order.
        strict: When False, errors are downgraded to warnings and the merged
            result always succeeds.

    Returns:
        A single ValidationResult; ``metadata`` holds the summed duration and
        the number of merged results.
    """
    errors = [f for r in results for f in r.errors]
    warnings = [f for r in results for f in r.warnings]
    info = [f for r in results for f in r.info]

    if not strict:
        warnings = [f.model_copy(update={"severity": Severity.WARNING}) for f in errors] + warnings
        errors = []

    return ValidationResult(
        success=not errors,
        errors=errors,
        warnings=warnings,
        info=info,
        results=[item for r in results for item in r.results],
        metadata={
            "duration_ms": sum(r.metadata.get("duration_ms", 0.0) for r in results),
            "results_merged": len(results),
            "strict": strict,
        },
    )
