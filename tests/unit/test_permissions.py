"""
Unit tests for file permission checks.
"""

from __future__ import annotations

from cfgcheck.domain.models import SecurityContext
from cfgcheck.domain.rules import PermissionRule
from cfgcheck.validators.permissions import (
    describe_permissions,
    format_permissions,
    get_recommended_permissions,
    is_permission_valid,
    parse_permissions,
    validate_permissions,
)
from cfgcheck.validators.security import validate_security


class TestValidatePermissions:
    """Tests for validate_permissions."""

    def test_too_open(self, env_permission_rule: PermissionRule) -> None:
        """World-readable dotenv files should fail."""
        checks = validate_permissions(".env", 0o644, [env_permission_rule])

        assert len(checks) == 1
        assert not checks[0].valid
        assert checks[0].current_permissions == 0o644
        assert checks[0].required_permissions == 0o600

    def test_within_bounds(self, env_permission_rule: PermissionRule) -> None:
        """Owner-only files should pass."""
        checks = validate_permissions("deploy/.env.production", 0o600, [env_permission_rule])

        assert [c.valid for c in checks] == [True]

    def test_rule_does_not_apply(self, env_permission_rule: PermissionRule) -> None:
        """Rules whose glob does not match should produce no checks."""
        assert validate_permissions("app.yaml", 0o777, [env_permission_rule]) == []

    def test_unknown_permissions(self, env_permission_rule: PermissionRule) -> None:
        """Unknown permissions should fail every applicable rule."""
        checks = validate_permissions(".env", None, [env_permission_rule])

        assert len(checks) == 1
        assert not checks[0].valid
        assert checks[0].message == "Permissions not available"

    def test_minimum_permissions(self) -> None:
        """Modes below the minimum should fail."""
        rule = PermissionRule(
            id="SCRIPT", file_pattern="*.sh", max_permissions="755", min_permissions="500"
        )

        assert rule.max_permissions == 0o755
        assert not is_permission_valid(0o400, rule)
        assert is_permission_valid(0o700, rule)
        assert not is_permission_valid(0o10000, rule)


class TestPermissionSecurityRule:
    """Tests for permission rules run by the security evaluator."""

    def test_reports_actual_mode(self, env_permission_rule: PermissionRule) -> None:
        """A failing rule should report the actual mode as decimal and octal text."""
        context = SecurityContext(file_path=".env", permissions=0o644)

        result = validate_security("API_URL=https://example.com", [env_permission_rule], context)

        assert not result.success
        rule_result = result.results[0]
        assert not rule_result.passed
        assert rule_result.matched_value == "420"
        finding = result.errors[0]
        assert finding.code == "SECURITY_ENV_PERMS"
        assert finding.message == "Invalid file permissions"
        assert finding.context["current_permissions"] == "0644"
        assert finding.context["max_permissions"] == "0600"


class TestPermissionHelpers:
    """Tests for formatting and recommendation helpers."""

    def test_format_and_parse(self) -> None:
        """Should convert between modes and octal text."""
        assert format_permissions(0o644) == "0644"
        assert format_permissions(-1) == "0000"
        assert parse_permissions("644") == 0o644
        assert parse_permissions("0o600") == 0o600
        assert parse_permissions("9z") == 0
        assert parse_permissions("") == 0

    def test_describe(self) -> None:
        """Should render symbolic permissions."""
        assert describe_permissions(0o754) == "rwxr-xr--"
        assert describe_permissions(0o100000) == "Invalid permissions"

    def test_recommendations(self) -> None:
        """Should recommend by file kind."""
        assert get_recommended_permissions("certs/server.pem") == 0o600
        assert get_recommended_permissions("bin/deploy.sh") == 0o755
        assert get_recommended_permissions("config/app.yaml") == 0o644
