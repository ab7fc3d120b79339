"""
File permission checks.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from cfgcheck.domain.models import PermissionCheck
from cfgcheck.domain.rules import PermissionRule
from cfgcheck.engine.matching import matches_file_pattern

MAX_MODE = 0o7777

SENSITIVE_FILE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\.env$", re.IGNORECASE),
    re.compile(r"\.env\..*$", re.IGNORECASE),
    re.compile(r"config\.json$", re.IGNORECASE),
    re.compile(r"secrets\.ya?ml$", re.IGNORECASE),
    re.compile(r"\.pem$", re.IGNORECASE),
    re.compile(r"\.key$", re.IGNORECASE),
    re.compile(r"\.p12$", re.IGNORECASE),
    re.compile(r"\.pfx$", re.IGNORECASE),
    re.compile(r"id_(?:rsa|dsa|ecdsa|ed25519)$", re.IGNORECASE),
]

EXECUTABLE_FILE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\.(?:sh|bash|zsh|fish)$", re.IGNORECASE),
    re.compile(r"\.(?:exe|bat|cmd)$", re.IGNORECASE),
    re.compile(r"\.(?:py|pl|rb|js|ts)$", re.IGNORECASE),
]


def validate_permissions(
    file_path: str,
    permissions: int | None,
    rules: Sequence[PermissionRule],
) -> list[PermissionCheck]:
    """
    Check a file's mode bits against the permission rules that apply to it.

    Args:
        file_path: Path of the file; rules apply when their glob matches it.
        permissions: Mode bits (e.g. ``0o644``), or None when unknown.
        rules: Permission rules; disabled rules are skipped.

    Returns:
        One PermissionCheck per applicable rule. With unknown permissions
        every applicable rule fails.
    """
    if not file_path or not file_path.strip() or not rules:
        return []

    applicable = [
        rule for rule in rules if rule.enabled and matches_file_pattern(file_path, rule.file_pattern)
    ]

    if permissions is None:
        return [
            PermissionCheck(
                file_path=file_path,
                rule_id=rule.id,
                required_permissions=rule.max_permissions,
                valid=False,
                message="Permissions not available",
            )
            for rule in applicable
        ]

    return [_check_rule(file_path, permissions, rule) for rule in applicable]


def _check_rule(file_path: str, permissions: int, rule: PermissionRule) -> PermissionCheck:
    valid = is_permission_valid(permissions, rule)
    return PermissionCheck(
        file_path=file_path,
        rule_id=rule.id,
        current_permissions=permissions,
        required_permissions=rule.max_permissions,
        valid=valid,
        message="" if valid else (
            f"Permissions {format_permissions(permissions)} outside allowed range "
            f"(max {format_permissions(rule.max_permissions)})"
        ),
    )


def is_permission_valid(permissions: int, rule: PermissionRule) -> bool:
    if permissions < 0 or permissions > MAX_MODE:
        return False
    if permissions > rule.max_permissions:
        return False
    if rule.min_permissions is not None and permissions < rule.min_permissions:
        return False
    return True


def format_permissions(permissions: int) -> str:
    """Four-digit octal text, ``0000`` for out-of-range values."""
    if permissions < 0 or permissions > MAX_MODE:
        return "0000"
    return format(permissions, "04o")


def parse_permissions(text: str) -> int:
    """Parse octal text (``"644"``, ``"0644"``, ``"0o644"``); invalid text yields 0."""
    if not text or not text.strip():
        return 0
    try:
        permissions = int(text.strip(), 8)
    except ValueError:
        return 0
    if permissions < 0 or permissions > MAX_MODE:
        return 0
    return permissions


def describe_permissions(permissions: int) -> str:
    """Symbolic ``rwxr-x---`` form of the owner/group/other bits."""
    if permissions < 0 or permissions > MAX_MODE:
        return "Invalid permissions"

    def bits(value: int) -> str:
        return (
            ("r" if value & 4 else "-")
            + ("w" if value & 2 else "-")
            + ("x" if value & 1 else "-")
        )

    return bits((permissions >> 6) & 7) + bits((permissions >> 3) & 7) + bits(permissions & 7)


def is_sensitive_file(file_path: str) -> bool:
    if not file_path or not file_path.strip():
        return False
    return any(pattern.search(file_path) for pattern in SENSITIVE_FILE_PATTERNS)


def is_executable_file(file_path: str) -> bool:
    if not file_path or not file_path.strip():
        return False
    name = file_path.rsplit("/", 1)[-1]
    if "." not in name:
        return True
    return any(pattern.search(file_path) for pattern in EXECUTABLE_FILE_PATTERNS)


def get_recommended_permissions(file_path: str) -> int:
    """0o600 for sensitive files, 0o755 for executables, otherwise 0o644."""
    if is_sensitive_file(file_path):
        return 0o600
    if is_executable_file(file_path):
        return 0o755
    return 0o644
