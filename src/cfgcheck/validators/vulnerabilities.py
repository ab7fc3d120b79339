"""
Insecure configuration pattern scanning.
"""

from __future__ import annotations

from collections.abc import Sequence

from cfgcheck.domain.models import VulnerabilityMatch
from cfgcheck.domain.rules import VulnerabilityRule
from cfgcheck.engine.matching import find_pattern_matches


def scan_vulnerabilities(
    content: str,
    rules: Sequence[VulnerabilityRule],
) -> list[VulnerabilityMatch]:
    """
    Report every occurrence of each enabled rule's pattern.

    Args:
        content: Raw file text.
        rules: Vulnerability rules; disabled rules are skipped.

    Returns:
        Matches in rule order then position, with 1-based line/column.
    """
    if not content or not content.strip() or not rules:
        return []

    found: list[VulnerabilityMatch] = []
    for rule in rules:
        if not rule.enabled:
            continue
        for match, line, column in find_pattern_matches(content, rule.pattern):
            found.append(
                VulnerabilityMatch(
                    type=rule.category,
                    rule_id=rule.id,
                    description=rule.description,
                    cve=rule.cve,
                    cvss_score=rule.cvss_score,
                    remediation=rule.remediation,
                    references=list(rule.references),
                    matched_value=match.group(0),
                    line_number=line,
                    column_number=column,
                )
            )
    return found
