"""
Compliance requirement checks.

A requirement is satisfied when its pattern occurs anywhere in the content.
This is an existence check over text, not structural validation.

Standards:
- PCI-DSS, GDPR, HIPAA, SOX, ISO27001: built-in requirement tables
- NIST, CIS: custom ComplianceRule sets only
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import NamedTuple

from cfgcheck.domain.models import ComplianceStandard, ComplianceStatus, SecuritySeverity
from cfgcheck.domain.rules import ComplianceRule

NO_CONTENT = "No content to validate"


class Requirement(NamedTuple):
    requirement: str
    description: str
    pattern: re.Pattern[str]


def _req(requirement: str, description: str, pattern: str) -> Requirement:
    return Requirement(requirement, description, re.compile(pattern, re.IGNORECASE))


REQUIREMENTS: dict[ComplianceStandard, list[Requirement]] = {
    ComplianceStandard.PCI_DSS: [
        _req("PCI-DSS-3.4", "Credit card data must be encrypted", r"credit.?card|card.?number|cc.?number"),
        _req("PCI-DSS-3.5", "Encryption keys must be protected", r"encryption.?key|secret.?key|private.?key"),
        _req("PCI-DSS-8.2", "Strong authentication required", r"password|authentication|auth"),
    ],
    ComplianceStandard.GDPR: [
        _req("GDPR-32", "Personal data must be encrypted", r"personal.?data|pii|personally.?identifiable"),
        _req("GDPR-25", "Data protection by design", r"data.?protection|privacy.?by.?design"),
        _req("GDPR-33", "Data breach notification required", r"breach.?notification|incident.?response"),
    ],
    ComplianceStandard.HIPAA: [
        _req("HIPAA-164.312(a)(1)", "Access control required", r"access.?control|user.?authentication"),
        _req("HIPAA-164.312(e)(1)", "Audit controls required", r"audit.?log|logging|audit.?trail"),
        _req("HIPAA-164.312(c)(1)", "Data encryption required", r"encryption|encrypted|secure.?transmission"),
    ],
    ComplianceStandard.SOX: [
        _req("SOX-404", "Internal controls required", r"internal.?control|control.?framework"),
        _req("SOX-302", "Management certification required", r"management.?certification|ceo.?certification"),
        _req("SOX-409", "Real-time disclosure required", r"real.?time.?disclosure|timely.?disclosure"),
    ],
    ComplianceStandard.ISO27001: [
        _req("ISO-27001-A.9.1", "Access control policy required", r"access.?control.?policy|user.?access.?management"),
        _req("ISO-27001-A.10.1", "Cryptography policy required", r"cryptography.?policy|encryption.?policy"),
        _req("ISO-27001-A.12.1", "Operational procedures required", r"operational.?procedures|security.?procedures"),
    ],
}

STANDARD_DESCRIPTIONS: dict[ComplianceStandard, str] = {
    ComplianceStandard.PCI_DSS: "Payment Card Industry Data Security Standard",
    ComplianceStandard.GDPR: "General Data Protection Regulation",
    ComplianceStandard.HIPAA: "Health Insurance Portability and Accountability Act",
    ComplianceStandard.SOX: "Sarbanes-Oxley Act",
    ComplianceStandard.ISO27001: "ISO/IEC 27001 Information Security Management",
    ComplianceStandard.NIST: "National Institute of Standards and Technology",
    ComplianceStandard.CIS: "Center for Internet Security",
}

STANDARD_SEVERITIES: dict[ComplianceStandard, SecuritySeverity] = {
    ComplianceStandard.PCI_DSS: SecuritySeverity.CRITICAL,
    ComplianceStandard.GDPR: SecuritySeverity.CRITICAL,
    ComplianceStandard.HIPAA: SecuritySeverity.CRITICAL,
    ComplianceStandard.SOX: SecuritySeverity.HIGH,
    ComplianceStandard.ISO27001: SecuritySeverity.HIGH,
    ComplianceStandard.NIST: SecuritySeverity.MEDIUM,
    ComplianceStandard.CIS: SecuritySeverity.MEDIUM,
}


def _is_blank(content: str | None) -> bool:
    return not content or not content.strip()


def _check_table(content: str, standard: ComplianceStandard) -> ComplianceStatus:
    if _is_blank(content):
        return ComplianceStatus(standard=standard, passed=False, failed_requirements=[NO_CONTENT])

    failed = [
        req.requirement for req in REQUIREMENTS.get(standard, []) if not req.pattern.search(content)
    ]
    return ComplianceStatus(standard=standard, passed=not failed, failed_requirements=failed)


def check_pci_dss_compliance(content: str) -> ComplianceStatus:
    return _check_table(content, ComplianceStandard.PCI_DSS)


def check_gdpr_compliance(content: str) -> ComplianceStatus:
    return _check_table(content, ComplianceStandard.GDPR)


def check_hipaa_compliance(content: str) -> ComplianceStatus:
    return _check_table(content, ComplianceStandard.HIPAA)


def check_sox_compliance(content: str) -> ComplianceStatus:
    return _check_table(content, ComplianceStandard.SOX)


def check_iso27001_compliance(content: str) -> ComplianceStatus:
    return _check_table(content, ComplianceStandard.ISO27001)


def check_standard(content: str, standard: ComplianceStandard | str) -> ComplianceStatus:
    """
    Check content against one standard's built-in table.

    Standards without a table (NIST, CIS) pass any non-blank content.
    """
    return _check_table(content, ComplianceStandard(standard))


def check_compliance(content: str, rules: Sequence[ComplianceRule]) -> ComplianceStatus:
    """
    Check content against externally supplied requirement rules.

    Args:
        content: Raw file text.
        rules: Compliance rules; disabled rules are skipped.

    Returns:
        Status for the first rule's standard (ISO27001 when there are no
        rules). Blank content always fails; an empty rule list always passes.
    """
    standard = rules[0].standard if rules else ComplianceStandard.ISO27001

    if _is_blank(content):
        return ComplianceStatus(standard=standard, passed=False, failed_requirements=[NO_CONTENT])
    if not rules:
        return ComplianceStatus(standard=standard, passed=True)

    failed = [
        rule.requirement
        for rule in rules
        if rule.enabled and not rule.pattern.search(content)
    ]
    return ComplianceStatus(standard=standard, passed=not failed, failed_requirements=failed)


def compliance_rules(standard: ComplianceStandard | str) -> list[ComplianceRule]:
    """Express a standard's built-in table as ComplianceRules for the security evaluator."""
    standard = ComplianceStandard(standard)
    severity = get_compliance_severity(standard)
    return [
        ComplianceRule(
            id=req.requirement,
            name=req.description,
            description=f"{get_compliance_standard_description(standard)}: {req.description}",
            severity=severity,
            standard=standard,
            requirement=req.requirement,
            pattern=req.pattern,
            requirement_description=req.description,
        )
        for req in REQUIREMENTS.get(standard, [])
    ]


def get_compliance_standard_description(standard: ComplianceStandard | str) -> str:
    try:
        return STANDARD_DESCRIPTIONS[ComplianceStandard(standard)]
    except ValueError:
        return "Unknown compliance standard"


def get_compliance_severity(standard: ComplianceStandard | str) -> SecuritySeverity:
    try:
        return STANDARD_SEVERITIES[ComplianceStandard(standard)]
    except ValueError:
        return SecuritySeverity.MEDIUM
