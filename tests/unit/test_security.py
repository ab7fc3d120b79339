"""
Unit tests for the security evaluator and built-in rule catalog.
"""

from __future__ import annotations

from cfgcheck.domain.models import ComplianceStandard, SecurityContext, SecuritySeverity
from cfgcheck.domain.rules import (
    BaseSecurityRule,
    ComplianceRule,
    SecretRule,
    VulnerabilityRule,
    parse_security_rule,
)
from cfgcheck.rules import DEFAULT_SECURITY_RULES, get_rule
from cfgcheck.validators.compliance import compliance_rules
from cfgcheck.validators.security import validate_security

CONTENT = """\
service:
  url: http://payments.internal/api
  token: sk-abcdefghijklmnopqrstuvwxyz
  debug: true
"""


class TestValidateSecurity:
    """Tests for validate_security."""

    def test_secret_failure(self, api_key_rule: SecretRule) -> None:
        """A detected secret should fail with a masked value."""
        result = validate_security(CONTENT, [api_key_rule])

        assert not result.valid
        finding = result.errors[0]
        assert finding.code == "SECURITY_API_KEY"
        assert finding.message == "Found 1 potential secrets"
        assert finding.context["line"] == 3
        assert result.results[0].matched_value.startswith("sk")
        assert "abcdefghij" not in result.results[0].matched_value

    def test_severity_mapping(self) -> None:
        """Medium and low rules should land in warnings and info."""
        medium = VulnerabilityRule(
            id="plain_http", pattern=r"http://", severity=SecuritySeverity.MEDIUM
        )
        low = VulnerabilityRule(id="debug", pattern=r"debug: true", severity=SecuritySeverity.LOW)

        result = validate_security(CONTENT, [medium, low])

        assert result.success
        assert [f.code for f in result.warnings] == ["SECURITY_PLAIN_HTTP"]
        assert [f.code for f in result.info] == ["SECURITY_DEBUG"]
        assert result.warnings[0].message == "Found 1 vulnerabilities"

    def test_summary_counts_failed_rules(self, api_key_rule: SecretRule) -> None:
        """Severity counts should cover failed rules only."""
        passing = SecretRule(id="AWS", pattern=r"AKIA[0-9A-Z]{16}", severity=SecuritySeverity.CRITICAL)

        result = validate_security(CONTENT, [api_key_rule, passing])

        summary = result.summary
        assert (summary.total, summary.passed, summary.failed) == (2, 1, 1)
        assert (summary.critical, summary.high) == (0, 1)

    def test_blank_content_or_no_rules(self, api_key_rule: SecretRule) -> None:
        """Nothing to scan should be a valid, empty result."""
        for result in (validate_security("", [api_key_rule]), validate_security(CONTENT, [])):
            assert result.valid
            assert result.summary.total == 0
            assert result.compliance is None

    def test_disabled_rules_skipped(self, api_key_rule: SecretRule) -> None:
        """Disabled rules should not be counted."""
        disabled = api_key_rule.model_copy(update={"enabled": False})

        assert validate_security(CONTENT, [disabled]).summary.total == 0

    def test_unknown_rule_type(self) -> None:
        """Unrecognised rule types should fail with a message."""
        rule = parse_security_rule({"id": "mystery", "type": "entropy", "severity": "high"})

        assert type(rule) is BaseSecurityRule
        result = validate_security(CONTENT, [rule])

        assert result.errors[0].message == "Unknown rule type: entropy"

    def test_compliance_rollup(self) -> None:
        """Compliance rules should produce a roll-up status."""
        rules = compliance_rules(ComplianceStandard.SOX)

        result = validate_security(CONTENT, rules)

        assert result.compliance is not None
        assert result.compliance.standard == ComplianceStandard.SOX
        assert result.compliance.failed_requirements == ["SOX-404", "SOX-302", "SOX-409"]
        assert "compliance" in result.to_json()

    def test_compliance_per_standard(self) -> None:
        """Several standards should be rolled up separately, in rule order."""
        rules = compliance_rules(ComplianceStandard.GDPR) + compliance_rules(ComplianceStandard.HIPAA)
        content = "personal_data: masked\nprivacy_by_design: true\nincident_response: pager\n"

        result = validate_security(content, rules)

        gdpr, hipaa = result.compliance_by_standard
        assert gdpr.standard == ComplianceStandard.GDPR
        assert gdpr.passed
        assert hipaa.standard == ComplianceStandard.HIPAA
        assert all(req.startswith("HIPAA-") for req in hipaa.failed_requirements)
        assert len(hipaa.failed_requirements) == 3
        assert result.compliance == gdpr

    def test_compliance_absent_without_compliance_rules(self, api_key_rule: SecretRule) -> None:
        """The roll-up should be omitted when no compliance rule ran."""
        data = validate_security(CONTENT, [api_key_rule]).to_json()

        assert "compliance" not in data
        assert data["summary"]["failed"] == 1

    def test_custom_compliance_rule(self) -> None:
        """A passing compliance rule should not produce findings."""
        rule = ComplianceRule(
            id="nist-log",
            standard="NIST",
            requirement="AU-2",
            pattern="debug",
        )

        result = validate_security(CONTENT, [rule])

        assert result.valid
        assert result.compliance.passed


class TestBuiltinCatalog:
    """Tests for the default security rules."""

    def test_rule_ids_unique(self) -> None:
        """Every built-in rule should have a distinct id."""
        ids = [rule.id for rule in DEFAULT_SECURITY_RULES]

        assert len(ids) == len(set(ids))

    def test_get_rule(self) -> None:
        """Should look rules up case-insensitively."""
        assert get_rule("aws_access_key").id == "AWS_ACCESS_KEY"
        assert get_rule("nope") is None

    def test_default_scan(self) -> None:
        """The catalog should flag plain HTTP, debug mode and the API key."""
        context = SecurityContext(file_path="service.yaml", permissions=0o644)

        result = validate_security(CONTENT, DEFAULT_SECURITY_RULES, context)

        codes = {f.code for f in result.findings}
        assert "SECURITY_OPENAI_API_KEY" in codes
        assert "SECURITY_INSECURE_HTTP_URL" in codes
        assert "SECURITY_DEBUG_ENABLED" in codes
