"""
Built-in file permission rules.
"""

from __future__ import annotations

from cfgcheck.domain.models import SecuritySeverity
from cfgcheck.domain.rules import PermissionRule

ENV_FILE_PERMISSIONS = PermissionRule(
    id="ENV_FILE_PERMISSIONS",
    name="Environment file permissions",
    description="Dotenv files must be readable by their owner only",
    severity=SecuritySeverity.HIGH,
    file_pattern=".env*",
    max_permissions=0o600,
    remediation="chmod 600 the file.",
)

KEY_FILE_PERMISSIONS = PermissionRule(
    id="KEY_FILE_PERMISSIONS",
    name="Key file permissions",
    description="Key material must be readable by its owner only",
    severity=SecuritySeverity.CRITICAL,
    file_pattern="*.key",
    max_permissions=0o600,
    remediation="chmod 600 the file.",
)

PEM_FILE_PERMISSIONS = PermissionRule(
    id="PEM_FILE_PERMISSIONS",
    name="PEM file permissions",
    description="PEM bundles may hold private keys",
    severity=SecuritySeverity.HIGH,
    file_pattern="*.pem",
    max_permissions=0o600,
    remediation="chmod 600 the file.",
)

SECRETS_FILE_PERMISSIONS = PermissionRule(
    id="SECRETS_FILE_PERMISSIONS",
    name="Secrets file permissions",
    description="Files named after secrets must be readable by their owner only",
    severity=SecuritySeverity.CRITICAL,
    file_pattern="*secret*",
    max_permissions=0o600,
    remediation="chmod 600 the file.",
)

DEFAULT_PERMISSION_RULES: list[PermissionRule] = [
    ENV_FILE_PERMISSIONS,
    KEY_FILE_PERMISSIONS,
    PEM_FILE_PERMISSIONS,
    SECRETS_FILE_PERMISSIONS,
]
