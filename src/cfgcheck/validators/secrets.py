"""
Secret detection in raw configuration text.

Each enabled SecretRule is scanned with a fresh iterator, so rules hold no
scan state between calls. Matched values are masked before they leave
this module.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from cfgcheck.domain.models import SecretMatch, SecurityContext, SecuritySeverity
from cfgcheck.domain.rules import SecretRule
from cfgcheck.engine.matching import find_pattern_matches

logger = logging.getLogger(__name__)

CONTEXT_RADIUS = 50

_DIGIT = re.compile(r"\d")
_LETTER = re.compile(r"[a-zA-Z]")
_SPECIAL = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")


def detect_secrets(
    content: str,
    rules: Sequence[SecretRule],
    context: SecurityContext | None = None,
) -> list[SecretMatch]:
    """
    Find potential secrets in text.

    Args:
        content: Raw file text.
        rules: Secret rules; disabled rules are skipped.
        context: Where the text came from (currently informational).

    Returns:
        One SecretMatch per non-excluded match, in rule order then position.

    Example:
        >>> rule = SecretRule(id="OPENAI_API_KEY", pattern=r"sk-[a-zA-Z0-9]{20,}", severity="high")
        >>> detect_secrets("key=sk-abcdefghijklmnopqrstuvwxyz", [rule])[0].masked_value[:2]
        'sk'
    """
    if not content or not content.strip() or not rules:
        return []

    matches: list[SecretMatch] = []
    for rule in rules:
        if not rule.enabled:
            continue
        matches.extend(_detect_with_rule(content, rule))

    if context is not None and matches:
        logger.debug("%d potential secret(s) in %s", len(matches), context.file_path or "<text>")
    return matches


def _detect_with_rule(content: str, rule: SecretRule) -> list[SecretMatch]:
    found: list[SecretMatch] = []
    for match, line, column in find_pattern_matches(content, rule.pattern):
        value = match.group(0)
        if is_false_positive(value, rule):
            continue

        confidence = calculate_confidence(value, rule.id)
        found.append(
            SecretMatch(
                secret_type=rule.name or rule.id,
                rule_id=rule.id,
                masked_value=mask_secret(value),
                confidence=confidence,
                severity=get_secret_severity(confidence),
                context=get_context_around(content, match.start()),
                line_number=line,
                column_number=column,
            )
        )
    return found


def is_false_positive(value: str, rule: SecretRule) -> bool:
    """Whether any exclude pattern of the rule matches the value."""
    return any(pattern.search(value) for pattern in rule.exclude_patterns)


def get_context_around(content: str, index: int, radius: int = CONTEXT_RADIUS) -> str:
    """Text from ``radius`` characters before to ``radius`` after ``index``."""
    return content[max(0, index - radius) : index + radius]


def mask_secret(value: str) -> str:
    """
    Hide most of a secret.

    Values of four characters or fewer are fully masked; longer values keep
    their first and last two characters around at least four ``*``. From
    eight characters up the result has the input's length.
    """
    if not value:
        return value
    if len(value) <= 4:
        return "*" * len(value)
    return value[:2] + "*" * max(4, len(value) - 4) + value[-2:]


def calculate_confidence(value: str, rule_id: str) -> int:
    """
    Heuristic confidence (0-100) that a match is a real secret.

    Starts at 50 and rises with length, letter/digit mix, special characters
    and rule-specific shapes (``sk-`` API keys, dotted JWTs).
    """
    if not value:
        return 0

    confidence = 50

    if len(value) >= 20:
        confidence += 20
    if len(value) >= 40:
        confidence += 10

    if _DIGIT.search(value) and _LETTER.search(value):
        confidence += 15
    if _SPECIAL.search(value):
        confidence += 10

    if "API_KEY" in rule_id and value.startswith("sk-"):
        confidence += 20
    if "JWT" in rule_id and "." in value:
        confidence += 15

    return min(100, confidence)


def get_secret_severity(confidence: int) -> SecuritySeverity:
    if confidence >= 90:
        return SecuritySeverity.CRITICAL
    if confidence >= 75:
        return SecuritySeverity.HIGH
    if confidence >= 50:
        return SecuritySeverity.MEDIUM
    return SecuritySeverity.LOW
