"""
Filesystem adapter for cfgcheck.

Handles reading configuration documents and their file modes, and writing
skeleton documents.
"""

from __future__ import annotations

import json
import logging
import stat
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cfgcheck.domain.exceptions import DocumentLoadError
from cfgcheck.domain.models import ConfigDocument

logger = logging.getLogger(__name__)

FORMATS_BY_SUFFIX = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}


class FileSystemAdapter:
    """
    Adapter for filesystem operations.

    All filesystem I/O in cfgcheck goes through this adapter,
    so the validators only ever see parsed documents.
    """

    def __init__(self, base_path: Path | None = None) -> None:
        """
        Initialize the filesystem adapter.

        Args:
            base_path: Base path for relative file operations.
        """
        self.base_path = base_path or Path.cwd()

    def read_text(self, path: Path | str) -> str:
        """
        Read a text file.

        Args:
            path: Path to the file.

        Returns:
            File contents.

        Raises:
            DocumentLoadError: If the file is missing or unreadable.
        """
        resolved = self._resolve_path(path)
        try:
            return resolved.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise DocumentLoadError(f"File not found: {path}", source=str(path))
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentLoadError(f"Cannot read {path}: {e}", source=str(path))

    def file_mode(self, path: Path | str) -> int | None:
        """Permission bits of a file, or None when it cannot be stat'ed."""
        try:
            return stat.S_IMODE(self._resolve_path(path).stat().st_mode)
        except OSError:
            return None

    def load_document(self, path: Path | str) -> ConfigDocument:
        """
        Read and parse a YAML or JSON document.

        The format follows the file extension.

        Args:
            path: Path to the document.

        Returns:
            ConfigDocument with the parsed tree, raw text and file mode.

        Raises:
            DocumentLoadError: If the file cannot be read or parsed, its root
                is not a mapping, or the tree is rejected by ConfigDocument.
        """
        source = str(path)
        fmt = FORMATS_BY_SUFFIX.get(Path(path).suffix.lower())
        if fmt is None:
            raise DocumentLoadError(
                f"Unsupported file type: {source} (expected .yaml, .yml or .json)",
                source=source,
            )

        text = self.read_text(path)
        content = self._parse(text, fmt, source)

        if content is not None and not isinstance(content, dict):
            raise DocumentLoadError(
                f"Document root must be a mapping: {source}", source=source
            )

        try:
            document = ConfigDocument(
                path=source,
                content=content,
                format=fmt,
                raw_text=text,
                permissions=self.file_mode(path),
            )
        except ValidationError as e:
            raise DocumentLoadError(f"Invalid document {source}: {e}", source=source)

        logger.debug("Loaded %s document %s", fmt, source)
        return document

    def load_documents(self, paths: Sequence[Path | str]) -> list[ConfigDocument]:
        """Load several documents in order; the first failure propagates."""
        return [self.load_document(path) for path in paths]

    def exists(self, path: Path | str) -> bool:
        """Check if a path exists."""
        return self._resolve_path(path).exists()

    def write_document(self, path: Path | str, tree: dict[Any, Any]) -> None:
        """
        Write a tree as YAML or JSON, following the file extension.

        Parent directories are created as needed.

        Raises:
            DocumentLoadError: If the file type is unsupported or the write fails.
        """
        source = str(path)
        fmt = FORMATS_BY_SUFFIX.get(Path(path).suffix.lower())
        if fmt is None:
            raise DocumentLoadError(f"Unsupported file type: {source}", source=source)

        if fmt == "json":
            text = json.dumps(tree, indent=2) + "\n"
        else:
            text = yaml.safe_dump(tree, sort_keys=False, default_flow_style=False)

        resolved = self._resolve_path(path)
        try:
            resolved.parent.mkdir(parents=True, exist_ok=True)
            resolved.write_text(text, encoding="utf-8")
        except OSError as e:
            raise DocumentLoadError(f"Cannot write {source}: {e}", source=source)

        logger.debug("Wrote %s document %s", fmt, source)

    def find_documents(self, directory: Path | str | None = None) -> list[Path]:
        """
        Find configuration documents in a directory (non-recursive).

        Args:
            directory: Directory to search (defaults to base_path).

        Returns:
            Sorted list of YAML and JSON files.
        """
        directory = self._resolve_path(directory) if directory else self.base_path
        return sorted(
            path
            for path in directory.iterdir()
            if path.is_file() and path.suffix.lower() in FORMATS_BY_SUFFIX
        )

    def _parse(self, text: str, fmt: str, source: str) -> Any:
        if fmt == "json":
            try:
                return json.loads(text) if text.strip() else None
            except json.JSONDecodeError as e:
                raise DocumentLoadError(
                    f"Invalid JSON in {source}: {e.msg}", source=source, line=e.lineno
                )

        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line = mark.line + 1 if mark is not None else None
            raise DocumentLoadError(f"Invalid YAML in {source}: {e}", source=source, line=line)

    def _resolve_path(self, path: Path | str) -> Path:
        """Resolve a path relative to base_path."""
        if isinstance(path, str):
            path = Path(path)

        if path.is_absolute():
            return path

        return self.base_path / path
