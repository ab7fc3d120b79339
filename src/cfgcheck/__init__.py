"""
cfgcheck: consistency, schema and security checks for configuration files

Compares environment files key by key, validates documents against a
JSON-Schema subset and pattern rules, and scans raw text for secrets,
insecure settings, loose file permissions and compliance gaps.

Usage:
    # CLI
    $ cfgcheck validate --config cfgcheck.yaml

    # Python API
    from cfgcheck import compare_documents, validate_schema

    result = compare_documents([dev, prod], ignore_keys=["debug.*"])
    print(result.errors)
"""

from cfgcheck.domain.config import ProjectConfig
from cfgcheck.domain.models import ConfigDocument, Finding, Severity
from cfgcheck.domain.report import SecurityValidationResult, ValidationResult
from cfgcheck.engine.equality import compare_documents
from cfgcheck.engine.pipeline import RuleEngine, merge_results
from cfgcheck.engine.runner import run_audit, run_validation
from cfgcheck.validators.patterns import validate_patterns
from cfgcheck.validators.schema import validate_schema
from cfgcheck.validators.security import validate_security

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Domain models
    "ConfigDocument",
    "Finding",
    "ProjectConfig",
    "Severity",
    # Results
    "SecurityValidationResult",
    "ValidationResult",
    # Engine
    "RuleEngine",
    "compare_documents",
    "merge_results",
    "run_audit",
    "run_validation",
    # Validators
    "validate_patterns",
    "validate_schema",
    "validate_security",
]
