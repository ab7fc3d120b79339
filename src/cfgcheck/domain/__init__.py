"""
Domain layer for cfgcheck.

Contains all core data structures with zero external dependencies
beyond Pydantic and PyYAML.
"""

from cfgcheck.domain.models import (
    ComplianceStandard,
    ComplianceStatus,
    ConfigDocument,
    Finding,
    PermissionCheck,
    SecretMatch,
    SecurityContext,
    SecuritySeverity,
    Severity,
    VulnerabilityMatch,
)
from cfgcheck.domain.schema import JsonSchema
from cfgcheck.domain.rules import (
    BaseSecurityRule,
    ComplianceRule,
    FormatRule,
    PatternRule,
    PermissionRule,
    SchemaRule,
    SecretRule,
    SecurityCheckRule,
    StructureRule,
    ValidationRule,
    VulnerabilityRule,
    parse_rule,
    parse_security_rule,
)
from cfgcheck.domain.report import (
    PatternCheck,
    SecurityRuleResult,
    SecuritySummary,
    SecurityValidationResult,
    ValidationResult,
)
from cfgcheck.domain.config import ProjectConfig, SecurityConfig
from cfgcheck.domain.exceptions import (
    CfgCheckError,
    ConfigError,
    DocumentLoadError,
    RuleError,
)

__all__ = [
    # Models
    "ComplianceStandard",
    "ComplianceStatus",
    "ConfigDocument",
    "Finding",
    "PermissionCheck",
    "SecretMatch",
    "SecurityContext",
    "SecuritySeverity",
    "Severity",
    "VulnerabilityMatch",
    "JsonSchema",
    # Rules
    "BaseSecurityRule",
    "ComplianceRule",
    "FormatRule",
    "PatternRule",
    "PermissionRule",
    "SchemaRule",
    "SecretRule",
    "SecurityCheckRule",
    "StructureRule",
    "ValidationRule",
    "VulnerabilityRule",
    "parse_rule",
    "parse_security_rule",
    # Results
    "PatternCheck",
    "SecurityRuleResult",
    "SecuritySummary",
    "SecurityValidationResult",
    "ValidationResult",
    # Configuration
    "ProjectConfig",
    "SecurityConfig",
    # Exceptions
    "CfgCheckError",
    "ConfigError",
    "DocumentLoadError",
    "RuleError",
]
