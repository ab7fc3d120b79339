"""
JSON renderer for cfgcheck.

Outputs machine-readable validation results.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cfgcheck.domain.report import ValidationResult


class JsonRenderer:
    """Renders validation results as JSON for CI pipelines."""

    def __init__(self, indent: int = 2, include_metadata: bool = True) -> None:
        """
        Initialize the JSON renderer.

        Args:
            indent: JSON indentation level.
            include_metadata: Whether to include run metadata.
        """
        self.indent = indent
        self.include_metadata = include_metadata

    def render(self, result: ValidationResult) -> str:
        """Render a result as a JSON string."""
        data = result.to_json()
        if not self.include_metadata:
            data.pop("metadata", None)
        return json.dumps(data, indent=self.indent, default=str)

    def render_to_file(self, result: ValidationResult, path: Path | str) -> None:
        """Write the rendered result to ``path``."""
        Path(path).write_text(self.render(result), encoding="utf-8")


def render_json(result: ValidationResult, **kwargs) -> str:
    """
    Convenience function to render a result as JSON.

    Args:
        result: The result to render.
        **kwargs: Options passed to JsonRenderer.

    Returns:
        JSON string.
    """
    renderer = JsonRenderer(**kwargs)
    return renderer.render(result)
