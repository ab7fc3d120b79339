"""
Pattern rule evaluation.

Each rule searches a regex in the value at its target path, or in the
whole document when no path is given.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Sequence
from typing import Any

from cfgcheck.domain.models import Finding, Severity
from cfgcheck.domain.report import PatternCheck, ValidationResult
from cfgcheck.domain.rules import PatternRule
from cfgcheck.engine.paths import MISSING, get_nested_value

logger = logging.getLogger(__name__)

REGEX_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def compile_flags(flags: str) -> re.RegexFlag:
    """Translate flag letters; letters without a Python meaning (such as ``g``) are ignored."""
    compiled = re.RegexFlag(0)
    for letter in flags:
        compiled |= REGEX_FLAGS.get(letter, re.RegexFlag(0))
    return compiled


def stringify(value: Any) -> str:
    """Text a pattern is searched in: containers as JSON, absent values as ``""``."""
    if value is MISSING or value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, bool)):
        return json.dumps(value, default=str)
    return str(value)


def validate_patterns(
    data: Any,
    rules: Sequence[PatternRule],
    file_path: str | None = None,
) -> ValidationResult:
    """
    Apply pattern rules to a parsed document.

    Args:
        data: Parsed document.
        rules: Pattern rules; disabled rules are skipped.
        file_path: Source of ``data``, copied into finding context.

    Returns:
        ValidationResult with one PatternCheck per rule in ``results`` and a
        ``summary`` in metadata.
    """
    if not rules or data is None:
        return ValidationResult(
            metadata={"summary": {"total": 0, "passed": 0, "failed": 0, "warnings": 0}}
        )

    checks: list[PatternCheck] = []
    findings: list[Finding] = []

    for rule in rules:
        if not rule.enabled:
            continue
        check, finding = _check_rule(data, rule, file_path)
        checks.append(check)
        if finding is not None:
            findings.append(finding)

    failed = [c for c in checks if not c.passed]
    summary = {
        "total": len(checks),
        "passed": len(checks) - len(failed),
        "failed": len(failed),
        "warnings": sum(1 for f in findings if f.severity == Severity.WARNING),
    }
    logger.debug("Pattern rules: %s", summary)

    return ValidationResult.from_findings(findings, results=checks, metadata={"summary": summary})


def _check_rule(
    data: Any, rule: PatternRule, file_path: str | None
) -> tuple[PatternCheck, Finding | None]:
    if rule.target_path:
        value = stringify(get_nested_value(data, rule.target_path))
    else:
        value = stringify(data)

    try:
        regex = re.compile(rule.pattern, compile_flags(rule.flags))
    except re.error as e:
        message = f"Invalid pattern: {rule.pattern}"
        return (
            PatternCheck(rule_id=rule.id, passed=False, target_path=rule.target_path, message=message),
            Finding(
                code="INVALID_PATTERN",
                message=message,
                path=rule.target_path or "",
                context={"rule_id": rule.id, "pattern": rule.pattern, "reason": str(e)},
            ),
        )

    if regex.search(value):
        return PatternCheck(rule_id=rule.id, passed=True, target_path=rule.target_path, value=value), None

    message = rule.message or f"Value does not match pattern: {rule.pattern}"
    context: dict[str, Any] = {"pattern": rule.pattern, "value": value}
    if file_path is not None:
        context["file"] = file_path

    return (
        PatternCheck(
            rule_id=rule.id,
            passed=False,
            target_path=rule.target_path,
            value=value,
            message=message,
        ),
        Finding(
            code=f"PATTERN_MISMATCH_{rule.id.upper()}",
            message=message,
            severity=rule.severity,
            path=rule.target_path or "",
            context=context,
        ),
    )
