"""
Built-in insecure configuration rules.
"""

from __future__ import annotations

import re

from cfgcheck.domain.models import SecuritySeverity
from cfgcheck.domain.rules import VulnerabilityRule

INSECURE_HTTP_URL = VulnerabilityRule(
    id="INSECURE_HTTP_URL",
    name="Plain HTTP endpoint",
    description="Endpoint reached over unencrypted HTTP",
    severity=SecuritySeverity.MEDIUM,
    category="protocol",
    pattern=re.compile(r"http://(?!localhost\b|127\.0\.0\.1\b|0\.0\.0\.0\b)[^\s\"'<>]+"),
    remediation="Use https:// for every non-local endpoint.",
    references=["https://cwe.mitre.org/data/definitions/319.html"],
)

TLS_VERIFY_DISABLED = VulnerabilityRule(
    id="TLS_VERIFY_DISABLED",
    name="TLS verification disabled",
    description="Certificate verification is turned off",
    severity=SecuritySeverity.HIGH,
    category="protocol",
    pattern=re.compile(
        r"(?i)\b(?:verify_?ssl|ssl_?verify|tls_?verify|verify_?certs?|insecure_?skip_?verify|verify)"
        r"[\"']?\s*[:=]\s*[\"']?(?:false|no|off|0)\b"
    ),
    remediation="Keep certificate verification on; trust a private CA bundle if needed.",
    references=["https://cwe.mitre.org/data/definitions/295.html"],
)

DEBUG_ENABLED = VulnerabilityRule(
    id="DEBUG_ENABLED",
    name="Debug mode enabled",
    description="Debug mode can leak stack traces and internals",
    severity=SecuritySeverity.LOW,
    category="configuration",
    pattern=re.compile(r"(?i)\bdebug[\"']?\s*[:=]\s*[\"']?(?:true|yes|on|1)\b"),
    remediation="Disable debug mode outside development environments.",
)

WEAK_HASH_ALGORITHM = VulnerabilityRule(
    id="WEAK_HASH_ALGORITHM",
    name="Weak hash algorithm",
    description="MD5 or SHA-1 configured for hashing or signing",
    severity=SecuritySeverity.MEDIUM,
    category="encryption",
    pattern=re.compile(r"(?i)\b(?:md5|sha-?1)\b"),
    remediation="Use SHA-256 or stronger, or a password hash such as bcrypt or argon2.",
    references=["https://cwe.mitre.org/data/definitions/328.html"],
)

WILDCARD_CORS = VulnerabilityRule(
    id="WILDCARD_CORS",
    name="Wildcard CORS origin",
    description="Any origin may call the service",
    severity=SecuritySeverity.MEDIUM,
    category="configuration",
    pattern=re.compile(
        r"(?i)\b(?:cors_?origins?|allowed_?origins|allow_?origins|access-control-allow-origin)"
        r"[\"']?\s*[:=]\s*\[?\s*[\"']?\*"
    ),
    remediation="List the allowed origins explicitly.",
)

WEAK_DEFAULT_PASSWORD = VulnerabilityRule(
    id="WEAK_DEFAULT_PASSWORD",
    name="Default password",
    description="A well-known default password is configured",
    severity=SecuritySeverity.HIGH,
    category="credential",
    pattern=re.compile(r"(?i)\bpassword[\"']?\s*[:=]\s*[\"']?(?:admin|password|123456|root)[\"']?\s*$", re.MULTILINE),
    remediation="Set a strong, unique password from a secrets manager.",
)

DEFAULT_VULNERABILITY_RULES: list[VulnerabilityRule] = [
    INSECURE_HTTP_URL,
    TLS_VERIFY_DISABLED,
    DEBUG_ENABLED,
    WEAK_HASH_ALGORITHM,
    WILDCARD_CORS,
    WEAK_DEFAULT_PASSWORD,
]
