"""
Exception hierarchy for cfgcheck.

All exceptions inherit from CfgCheckError for easy catching. Validators never
raise for bad input data; these are raised by loaders and config parsing.
"""

from __future__ import annotations


class CfgCheckError(Exception):
    """Base exception for all cfgcheck errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DocumentLoadError(CfgCheckError):
    """Raised when a configuration document cannot be read or parsed."""

    def __init__(self, message: str, source: str | None = None, line: int | None = None) -> None:
        super().__init__(message, {"source": source, "line": line})
        self.source = source
        self.line = line


class RuleError(CfgCheckError):
    """Raised when a rule definition cannot be parsed."""

    def __init__(self, message: str, rule_id: str | None = None) -> None:
        super().__init__(message, {"rule_id": rule_id})
        self.rule_id = rule_id


class ConfigError(CfgCheckError):
    """Raised when the project configuration is invalid."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        super().__init__(message, {"config_key": config_key})
        self.config_key = config_key
