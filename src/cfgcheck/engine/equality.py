"""
Key equality analysis: do environment-specific documents expose the same keys?
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import Any

from cfgcheck.domain.models import ConfigDocument, Finding, Severity
from cfgcheck.domain.report import ValidationResult
from cfgcheck.engine.matching import is_key_ignored
from cfgcheck.engine.paths import extract_keys, is_empty_value, join_path

logger = logging.getLogger(__name__)


def compare_documents(
    documents: Sequence[ConfigDocument],
    ignore_keys: Sequence[str] = (),
    required_keys: Sequence[str] = (),
) -> ValidationResult:
    """
    Compare the key sets of several documents.

    This is the primary public API for equality analysis.

    Args:
        documents: Parsed documents, typically one per environment.
        ignore_keys: Exact keys, branch prefixes or ``*`` wildcards to skip.
        required_keys: Keys every document must contain, ignore rules notwithstanding.

    Returns:
        ValidationResult with MISSING_KEY / REQUIRED_KEY_MISSING errors and
        EMPTY_KEY info findings.

    Example:
        >>> result = compare_documents([dev, prod], ignore_keys=["debug.*"])
        >>> if not result.success:
        ...     sys.exit(1)
    """
    analyzer = KeyEqualityAnalyzer(ignore_keys=ignore_keys, required_keys=required_keys)
    return analyzer.compare(documents)


class KeyEqualityAnalyzer:
    """
    Checks that every document carries the union of all documents' keys.

    Findings are grouped per document, in the order keys were first seen.
    """

    def __init__(
        self,
        ignore_keys: Sequence[str] = (),
        required_keys: Sequence[str] = (),
    ) -> None:
        self.ignore_keys = list(ignore_keys)
        self.required_keys = list(required_keys)

    def compare(self, documents: Sequence[ConfigDocument]) -> ValidationResult:
        """Run the analysis over ``documents``."""
        start_time = time.perf_counter()

        if len(documents) < 2:
            logger.debug("Skipping key comparison: %d document(s)", len(documents))
            return ValidationResult(
                success=True,
                warnings=[
                    Finding(
                        code="INSUFFICIENT_FILES",
                        message="Need at least 2 files to compare",
                        severity=Severity.WARNING,
                    )
                ],
                metadata={
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                    "rules_checked": 1,
                    "rules_passed": 1,
                    "rules_failed": 0,
                    "files_compared": len(documents),
                },
            )

        document_keys = [extract_keys(doc.content) for doc in documents]
        master_keys = self._collect_master_keys(document_keys)

        errors = self._find_missing_keys(documents, document_keys, master_keys)
        errors.extend(self._find_missing_required(documents, document_keys))
        empty = [
            finding
            for doc in documents
            for finding in self._find_empty_keys(doc.content, "", doc.path)
        ]

        success = not errors
        logger.debug(
            "Compared %d documents: %d master keys, %d errors, %d empty",
            len(documents),
            len(master_keys),
            len(errors),
            len(empty),
        )

        return ValidationResult(
            success=success,
            errors=errors,
            info=empty,
            metadata={
                "duration_ms": (time.perf_counter() - start_time) * 1000,
                "rules_checked": 1,
                "rules_passed": 1 if success else 0,
                "rules_failed": 0 if success else 1,
                "files_compared": len(documents),
                "total_keys": len(master_keys),
                "ignored_keys": len(self.ignore_keys),
                "required_keys": len(self.required_keys),
                "empty_keys": len(empty),
            },
        )

    def _collect_master_keys(self, document_keys: list[list[str]]) -> list[str]:
        """Union of non-ignored keys, in first-seen order."""
        master: dict[str, None] = {}
        for keys in document_keys:
            for key in keys:
                if not is_key_ignored(key, self.ignore_keys):
                    master.setdefault(key, None)
        return list(master)

    def _find_missing_keys(
        self,
        documents: Sequence[ConfigDocument],
        document_keys: list[list[str]],
        master_keys: list[str],
    ) -> list[Finding]:
        findings: list[Finding] = []
        for doc, keys in zip(documents, document_keys):
            present = set(keys)
            for key in master_keys:
                if key in present or is_key_ignored(key, self.ignore_keys):
                    continue
                findings.append(
                    Finding(
                        code="MISSING_KEY",
                        message=f"Key '{key}' is missing in {doc.path}",
                        path=key,
                        context={"file": doc.path, "missing_key": key, "available_keys": keys},
                    )
                )
        return findings

    def _find_missing_required(
        self,
        documents: Sequence[ConfigDocument],
        document_keys: list[list[str]],
    ) -> list[Finding]:
        # Required keys are checked regardless of ignore patterns
        findings: list[Finding] = []
        for required in self.required_keys:
            for doc, keys in zip(documents, document_keys):
                if required in keys:
                    continue
                findings.append(
                    Finding(
                        code="REQUIRED_KEY_MISSING",
                        message=f"Required key '{required}' is missing in {doc.path}",
                        path=required,
                        context={"file": doc.path, "required_key": required, "available_keys": keys},
                    )
                )
        return findings

    def _find_empty_keys(self, tree: Any, prefix: str, file_path: str) -> list[Finding]:
        findings: list[Finding] = []
        if not isinstance(tree, dict):
            return findings

        for key, value in tree.items():
            path = join_path(prefix, key)
            if is_key_ignored(path, self.ignore_keys):
                continue

            if is_empty_value(value):
                findings.append(
                    Finding(
                        code="EMPTY_KEY",
                        message=f"Key '{path}' has empty value in {file_path}",
                        severity=Severity.INFO,
                        path=path,
                        context={
                            "file": file_path,
                            "key": path,
                            "value": value,
                            "value_type": type(value).__name__,
                        },
                    )
                )

            if isinstance(value, dict):
                findings.extend(self._find_empty_keys(value, path, file_path))

        return findings
