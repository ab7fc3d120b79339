"""
Built-in security rules for cfgcheck.

Each rule is plain data; the validators in ``cfgcheck.validators`` apply
them. Projects can disable the catalog and supply their own rules.
"""

from cfgcheck.domain.rules import BaseSecurityRule
from cfgcheck.rules.permissions import DEFAULT_PERMISSION_RULES
from cfgcheck.rules.secrets import DEFAULT_SECRET_RULES
from cfgcheck.rules.vulnerabilities import DEFAULT_VULNERABILITY_RULES

# Default security ruleset
DEFAULT_SECURITY_RULES: list[BaseSecurityRule] = [
    *DEFAULT_SECRET_RULES,
    *DEFAULT_VULNERABILITY_RULES,
    *DEFAULT_PERMISSION_RULES,
]


def get_rule(rule_id: str) -> BaseSecurityRule | None:
    """Look up a built-in rule by ID (case-insensitive)."""
    rule_id = rule_id.upper()
    return next((rule for rule in DEFAULT_SECURITY_RULES if rule.id == rule_id), None)


__all__ = [
    "DEFAULT_PERMISSION_RULES",
    "DEFAULT_SECRET_RULES",
    "DEFAULT_SECURITY_RULES",
    "DEFAULT_VULNERABILITY_RULES",
    "get_rule",
]
