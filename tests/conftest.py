"""
Pytest configuration and shared fixtures for cfgcheck tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from cfgcheck.domain.models import ConfigDocument, SecuritySeverity
from cfgcheck.domain.rules import PermissionRule, SecretRule


# --- Markers ---

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow"
    )


# --- Fixtures: Documents ---

@pytest.fixture
def dev_content() -> dict[str, Any]:
    """Development settings."""
    return {
        "app": {"name": "billing", "port": 8080},
        "database": {"host": "localhost", "port": 5432},
        "debug": {"enabled": True, "level": "verbose"},
    }


@pytest.fixture
def prod_content() -> dict[str, Any]:
    """Production settings, without the debug branch."""
    return {
        "app": {"name": "billing", "port": 80},
        "database": {"host": "db.internal", "port": 5432},
    }


@pytest.fixture
def dev_document(dev_content: dict[str, Any]) -> ConfigDocument:
    return ConfigDocument(path="config/development.yaml", content=dev_content)


@pytest.fixture
def prod_document(prod_content: dict[str, Any]) -> ConfigDocument:
    return ConfigDocument(path="config/production.yaml", content=prod_content)


# --- Fixtures: Schemas ---

@pytest.fixture
def service_schema() -> dict[str, Any]:
    """Schema for the app section, written with camelCase keywords."""
    return {
        "type": "object",
        "required": ["app"],
        "properties": {
            "app": {
                "type": "object",
                "required": ["name", "port"],
                "additionalProperties": False,
                "properties": {
                    "name": {"type": "string", "minLength": 3, "maxLength": 20},
                    "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                },
            },
        },
    }


# --- Fixtures: Security rules ---

@pytest.fixture
def api_key_rule() -> SecretRule:
    """Secret rule for sk- style API keys."""
    return SecretRule(
        id="API_KEY",
        name="API key",
        pattern=r"sk-[a-zA-Z0-9]{20,}",
        severity=SecuritySeverity.HIGH,
    )


@pytest.fixture
def env_permission_rule() -> PermissionRule:
    """Owner-only permission rule for dotenv files."""
    return PermissionRule(
        id="ENV_PERMS",
        name="Env file permissions",
        file_pattern=".env*",
        max_permissions=0o600,
        severity=SecuritySeverity.HIGH,
    )


# --- Fixtures: Files ---

@pytest.fixture
def project_dir(tmp_path: Path, dev_content: dict[str, Any], prod_content: dict[str, Any]) -> Path:
    """A project directory with two environment files and a project file."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "development.yaml").write_text(yaml.safe_dump(dev_content), encoding="utf-8")
    (config_dir / "production.yaml").write_text(yaml.safe_dump(prod_content), encoding="utf-8")

    project = {
        "environments": {
            "dev": "config/development.yaml",
            "prod": "config/production.yaml",
        },
        "ignore_keys": ["debug"],
        "required_keys": ["database.host"],
    }
    (tmp_path / "cfgcheck.yaml").write_text(yaml.safe_dump(project), encoding="utf-8")
    return tmp_path
