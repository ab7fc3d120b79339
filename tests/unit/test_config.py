"""
Unit tests for project configuration loading.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from cfgcheck.domain.config import ProjectConfig
from cfgcheck.domain.exceptions import ConfigError
from cfgcheck.domain.models import ComplianceStandard
from cfgcheck.domain.rules import PatternRule, SchemaRule, SecretRule, StructureRule


class TestProjectConfig:
    """Tests for ProjectConfig loading."""

    def test_from_dict(self, service_schema: dict[str, Any]) -> None:
        """Should load every section."""
        config = ProjectConfig.from_dict(
            {
                "files": ["a.yaml", "b.yaml"],
                "ignore_keys": ["debug.*"],
                "schema": service_schema,
                "security": {
                    "enabled": True,
                    "compliance": ["PCI-DSS"],
                    "rules": [{"id": "corp", "type": "secret", "pattern": "corp_[0-9a-f]{32}"}],
                },
                "strict": False,
            }
        )

        assert config.files == ["a.yaml", "b.yaml"]
        assert config.json_schema is not None
        assert config.json_schema.required == ["app"]
        assert config.security.compliance == [ComplianceStandard.PCI_DSS]
        assert isinstance(config.security.rules[0], SecretRule)
        assert not config.strict

    def test_defaults(self) -> None:
        """An empty mapping should give a strict, security-off config."""
        config = ProjectConfig.from_dict({})

        assert config.strict
        assert not config.security.enabled
        assert config.security.use_default_rules
        assert config.document_rules() == []

    def test_invalid_values(self) -> None:
        """Type errors should become ConfigError."""
        with pytest.raises(ConfigError):
            ProjectConfig.from_dict({"files": "a.yaml"})

    def test_invalid_rule(self) -> None:
        """A malformed rule should name the rules section."""
        with pytest.raises(ConfigError) as exc_info:
            ProjectConfig.from_dict({"rules": [{"id": "s", "type": "structure", "maxDepth": 0}]})

        assert exc_info.value.config_key == "rules"

    def test_non_mapping_root(self) -> None:
        """A list root should be rejected."""
        with pytest.raises(ConfigError):
            ProjectConfig.from_dict(["files"])  # type: ignore[arg-type]


class TestFromFile:
    """Tests for loading from YAML."""

    def test_from_file(self, project_dir: Path) -> None:
        """Should load the project file."""
        config = ProjectConfig.from_file(project_dir / "cfgcheck.yaml")

        assert config.environments["prod"] == "config/production.yaml"
        assert config.required_keys == ["database.host"]

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file should raise ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            ProjectConfig.from_file(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Unparseable YAML should raise ConfigError."""
        path = tmp_path / "cfgcheck.yaml"
        path.write_text("files: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            ProjectConfig.from_file(path)

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file should load defaults."""
        path = tmp_path / "cfgcheck.yaml"
        path.write_text("", encoding="utf-8")

        assert ProjectConfig.from_file(path).files == []


class TestFilesToCompare:
    """Tests for document resolution."""

    def test_files_win(self) -> None:
        """Explicit files should take precedence over environments."""
        config = ProjectConfig(files=["x.yaml"], environments={"dev": "dev.yaml"})

        assert config.files_to_compare() == ["x.yaml"]

    def test_environments(self) -> None:
        """Environment values should be used when no files are listed."""
        config = ProjectConfig(environments={"dev": "dev.yaml", "prod": "prod.yaml"})

        assert config.files_to_compare() == ["dev.yaml", "prod.yaml"]
        assert config.files_to_compare("prod") == ["prod.yaml"]

    def test_unknown_environment(self) -> None:
        """An undeclared environment should raise ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            ProjectConfig(environments={"dev": "dev.yaml"}).files_to_compare("qa")

        assert exc_info.value.config_key == "environments"


class TestDocumentRules:
    """Tests for shorthand rule expansion."""

    def test_expansion_order(self, service_schema: dict[str, Any]) -> None:
        """Forbidden keys, schema, patterns and extra rules should expand in order."""
        config = ProjectConfig.from_dict(
            {
                "forbidden_keys": ["debug"],
                "schema": service_schema,
                "patterns": {"app.name": "^[a-z]+$"},
                "rules": [{"id": "depth", "type": "structure", "maxDepth": 4}],
            }
        )

        rules = config.document_rules()

        assert [type(r) for r in rules] == [StructureRule, SchemaRule, PatternRule, StructureRule]
        pattern = rules[2]
        assert pattern.id == "app_name"
        assert pattern.target_path == "app.name"
        assert pattern.message == "Value of 'app.name' does not match pattern: ^[a-z]+$"
        assert rules[3].max_depth == 4
