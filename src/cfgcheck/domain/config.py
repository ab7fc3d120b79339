"""
Project configuration.

A project file (``cfgcheck.yaml`` by default) declares which documents to
compare and which rules to apply to them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cfgcheck.domain.exceptions import ConfigError, RuleError
from cfgcheck.domain.models import ComplianceStandard
from cfgcheck.domain.rules import (
    BaseSecurityRule,
    PatternRule,
    SchemaRule,
    StructureRule,
    ValidationRule,
    parse_rule,
    parse_security_rule,
)
from cfgcheck.domain.schema import JsonSchema

DEFAULT_CONFIG_FILE = "cfgcheck.yaml"


class SecurityConfig(BaseModel):
    """The ``security`` section of a project file."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Run the security evaluator")
    use_default_rules: bool = Field(
        default=True, description="Include the built-in secret/vulnerability/permission rules"
    )
    rules: list[BaseSecurityRule] = Field(default_factory=list, description="Extra rules")
    compliance: list[ComplianceStandard] = Field(
        default_factory=list, description="Standards checked with the built-in requirement tables"
    )

    @field_validator("rules", mode="before")
    @classmethod
    def validate_rules(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        return [parse_security_rule(item) if isinstance(item, dict) else item for item in v]


class ProjectConfig(BaseModel):
    """
    Complete project definition.

    Loaded from YAML and consumed by the runner.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    files: list[str] = Field(default_factory=list, description="Documents to compare")
    environments: dict[str, str] = Field(
        default_factory=dict, description="Environment name to document path"
    )
    ignore_keys: list[str] = Field(
        default_factory=list, description="Key patterns excluded from equality analysis"
    )
    required_keys: list[str] = Field(
        default_factory=list, description="Keys every document must contain"
    )
    forbidden_keys: list[str] = Field(
        default_factory=list, description="Keys no document may contain"
    )
    json_schema: JsonSchema | None = Field(
        default=None, alias="schema", description="Schema applied to each document"
    )
    patterns: dict[str, str] = Field(
        default_factory=dict, description="Key path to regex the value must match"
    )
    rules: list[ValidationRule] = Field(default_factory=list, description="Extra rules")
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    strict: bool = Field(default=True, description="Errors block success when true")

    @field_validator("rules", mode="before")
    @classmethod
    def validate_rules(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        return [parse_rule(item) if isinstance(item, dict) else item for item in v]

    @classmethod
    def from_file(cls, path: Path | str) -> ProjectConfig:
        """
        Load a project configuration from a YAML file.

        Args:
            path: Path to the project file.

        Returns:
            ProjectConfig instance.

        Raises:
            ConfigError: If the file cannot be read, parsed or validated.
        """
        path = Path(path)

        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found: {path}", config_key=str(path))
        except OSError as e:
            raise ConfigError(f"Error reading configuration: {e}", config_key=str(path))

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration: {e}", config_key=str(path))

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectConfig:
        """
        Load a project configuration from a dictionary.

        Raises:
            ConfigError: If the data does not describe a valid configuration.
        """
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")
        except RuleError as e:
            raise ConfigError(e.message, config_key="rules")

    def files_to_compare(self, environment: str | None = None) -> list[str]:
        """
        Resolve the list of documents to validate.

        ``files`` wins over ``environments``; naming an environment selects
        its single document.

        Raises:
            ConfigError: If the named environment is not declared.
        """
        if environment is not None:
            if environment not in self.environments:
                raise ConfigError(
                    f"Unknown environment '{environment}'", config_key="environments"
                )
            return [self.environments[environment]]

        if self.files:
            return list(self.files)
        return list(self.environments.values())

    def document_rules(self) -> list[ValidationRule]:
        """Rules applied to every document, derived from the shorthand keys plus ``rules``."""
        rules: list[ValidationRule] = []

        if self.forbidden_keys:
            rules.append(
                StructureRule(id="forbidden-keys", forbidden_properties=list(self.forbidden_keys))
            )

        if self.json_schema is not None:
            rules.append(SchemaRule(id="schema", json_schema=self.json_schema))

        for key_path, pattern in self.patterns.items():
            rules.append(
                PatternRule(
                    id=key_path.replace(".", "_"),
                    pattern=pattern,
                    target_path=key_path,
                    message=f"Value of '{key_path}' does not match pattern: {pattern}",
                )
            )

        rules.extend(self.rules)
        return rules
