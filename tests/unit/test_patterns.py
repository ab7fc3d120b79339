"""
Unit tests for pattern rule evaluation.
"""

from __future__ import annotations

from cfgcheck.domain.models import Severity
from cfgcheck.domain.report import PatternCheck
from cfgcheck.domain.rules import PatternRule
from cfgcheck.validators.patterns import compile_flags, stringify, validate_patterns


class TestValidatePatterns:
    """Tests for validate_patterns."""

    def test_matching_value(self) -> None:
        """A matching value should pass."""
        rule = PatternRule(id="port", pattern=r"^\d+$", target_path="app.port")

        result = validate_patterns({"app": {"port": 8080}}, [rule])

        assert result.success
        assert result.metadata["summary"] == {"total": 1, "passed": 1, "failed": 0, "warnings": 0}
        check = result.results[0]
        assert isinstance(check, PatternCheck)
        assert check.passed
        assert check.value == "8080"

    def test_mismatch(self) -> None:
        """A mismatch should carry the rule id in its code."""
        rule = PatternRule(id="env", pattern="^(dev|prod)$", target_path="env")

        result = validate_patterns({"env": "qa"}, [rule], file_path="app.yaml")

        finding = result.errors[0]
        assert finding.code == "PATTERN_MISMATCH_ENV"
        assert finding.message == "Value does not match pattern: ^(dev|prod)$"
        assert finding.path == "env"
        assert finding.context == {"pattern": "^(dev|prod)$", "value": "qa", "file": "app.yaml"}

    def test_rule_severity_and_message(self) -> None:
        """Findings should use the rule's severity and custom message."""
        rule = PatternRule(
            id="region",
            pattern="^eu-",
            target_path="region",
            severity=Severity.WARNING,
            message="Region must be in the EU",
        )

        result = validate_patterns({"region": "us-east-1"}, [rule])

        assert result.success
        assert result.warnings[0].message == "Region must be in the EU"
        assert result.metadata["summary"]["warnings"] == 1

    def test_missing_value_is_empty_text(self) -> None:
        """An absent target should be searched as an empty string."""
        optional = PatternRule(id="opt", pattern="^$", target_path="missing")
        required = PatternRule(id="req", pattern=".+", target_path="missing")

        result = validate_patterns({}, [optional, required])

        assert [f.code for f in result.errors] == ["PATTERN_MISMATCH_REQ"]

    def test_whole_document(self) -> None:
        """Without a target path the whole document is searched as JSON."""
        rule = PatternRule(id="no_localhost", pattern='"localhost"')

        assert validate_patterns({"db": {"host": "localhost"}}, [rule]).success

    def test_flags(self) -> None:
        """Flag letters should map to regex flags."""
        rule = PatternRule(id="name", pattern="^billing$", flags="i", target_path="name")

        assert validate_patterns({"name": "BILLING"}, [rule]).success

    def test_invalid_pattern(self) -> None:
        """An invalid regex should fail the rule, not raise."""
        rule = PatternRule(id="broken", pattern="[unclosed", target_path="a")

        result = validate_patterns({"a": "x"}, [rule])

        assert [f.code for f in result.errors] == ["INVALID_PATTERN"]
        assert not result.results[0].passed

    def test_disabled_rules_and_empty_input(self) -> None:
        """Disabled rules, no rules and no data should all yield empty results."""
        disabled = PatternRule(id="off", pattern="x", target_path="a", enabled=False)

        assert validate_patterns({"a": "y"}, [disabled]).metadata["summary"]["total"] == 0
        assert validate_patterns({"a": "y"}, []).success
        assert validate_patterns(None, [disabled]).success


class TestHelpers:
    """Tests for pattern helpers."""

    def test_stringify(self) -> None:
        """Should render values the way they are searched."""
        assert stringify(None) == ""
        assert stringify(False) == "false"
        assert stringify(0) == "0"
        assert stringify([1, "a"]) == '[1, "a"]'

    def test_unknown_flags_ignored(self) -> None:
        """Letters without a meaning should be ignored."""
        assert compile_flags("gi") == compile_flags("i")
