"""
Validators for cfgcheck.

Each validator is a pure function over in-memory data: no I/O, and bad
input data is reported as findings rather than raised.
"""

from cfgcheck.validators.compliance import (
    check_compliance,
    check_gdpr_compliance,
    check_hipaa_compliance,
    check_iso27001_compliance,
    check_pci_dss_compliance,
    check_sox_compliance,
    check_standard,
    compliance_rules,
)
from cfgcheck.validators.patterns import validate_patterns
from cfgcheck.validators.permissions import validate_permissions
from cfgcheck.validators.schema import SchemaValidator, validate_schema
from cfgcheck.validators.secrets import detect_secrets, mask_secret
from cfgcheck.validators.security import validate_security
from cfgcheck.validators.structure import validate_value
from cfgcheck.validators.vulnerabilities import scan_vulnerabilities

__all__ = [
    # Schema pipeline
    "SchemaValidator",
    "validate_schema",
    "validate_value",
    # Patterns
    "validate_patterns",
    # Security
    "validate_security",
    "detect_secrets",
    "mask_secret",
    "validate_permissions",
    "scan_vulnerabilities",
    # Compliance
    "check_compliance",
    "check_standard",
    "check_pci_dss_compliance",
    "check_gdpr_compliance",
    "check_hipaa_compliance",
    "check_sox_compliance",
    "check_iso27001_compliance",
    "compliance_rules",
]
