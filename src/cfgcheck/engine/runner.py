"""
Validation runs over files on disk.

Loads documents through the filesystem adapter, then chains equality
analysis, document rules and the security evaluator into one result.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from cfgcheck.adapters.fs import FileSystemAdapter
from cfgcheck.domain.config import ProjectConfig
from cfgcheck.domain.exceptions import ConfigError, DocumentLoadError
from cfgcheck.domain.models import ComplianceStandard, ConfigDocument, Finding, SecurityContext
from cfgcheck.domain.report import SecurityValidationResult, ValidationResult
from cfgcheck.domain.rules import BaseSecurityRule, StructureRule, ValidationRule
from cfgcheck.engine.equality import compare_documents
from cfgcheck.engine.pipeline import merge_results, validate_document
from cfgcheck.engine.structure import empty_structure
from cfgcheck.rules import DEFAULT_SECURITY_RULES
from cfgcheck.validators.compliance import compliance_rules
from cfgcheck.validators.security import validate_security

logger = logging.getLogger(__name__)


def run_validation(
    config: ProjectConfig,
    files: Sequence[Path | str] | None = None,
    environment: str | None = None,
    strict: bool | None = None,
    adapter: FileSystemAdapter | None = None,
) -> ValidationResult:
    """
    Validate a project's documents.

    Args:
        config: Project configuration.
        files: Documents to validate instead of the configured ones.
        environment: Validate only this environment's document.
        strict: Overrides ``config.strict``.
        adapter: Filesystem adapter (defaults to one rooted at the cwd).

    Returns:
        The merged ValidationResult. A configuration or loading failure
        yields a result holding a single fatal finding.

    Example:
        >>> config = ProjectConfig.from_file("cfgcheck.yaml")
        >>> result = run_validation(config, environment="prod")
        >>> sys.exit(result.exit_code)
    """
    adapter = adapter or FileSystemAdapter()
    strict = config.strict if strict is None else strict

    try:
        paths = [str(f) for f in files] if files else config.files_to_compare(environment)
    except ConfigError as e:
        return _fatal("CONFIG_LOAD_ERROR", e.message, config_key=e.config_key)

    try:
        documents = adapter.load_documents(paths)
    except DocumentLoadError as e:
        logger.warning("Could not load %s: %s", e.source, e.message)
        return _fatal("FILE_LOAD_ERROR", e.message, file=e.source, line=e.line)

    logger.info("Validating %d document(s)", len(documents))

    results: list[ValidationResult] = [
        compare_documents(
            documents, ignore_keys=config.ignore_keys, required_keys=config.required_keys
        )
    ]

    rules = _document_rules(config, len(documents))
    if rules:
        results.extend(validate_document(document, rules) for document in documents)

    if config.security.enabled:
        security_rules = _security_rules(
            config.security.rules,
            config.security.compliance,
            use_default_rules=config.security.use_default_rules,
        )
        results.extend(_scan(document, security_rules) for document in documents)

    merged = merge_results(results, strict=strict)
    return merged.model_copy(
        update={"metadata": {**merged.metadata, "files": [d.path for d in documents]}}
    )


def run_audit(
    paths: Sequence[Path | str],
    standards: Sequence[ComplianceStandard | str] = (),
    adapter: FileSystemAdapter | None = None,
) -> ValidationResult:
    """
    Security-only scan with the built-in rule catalog.

    Args:
        paths: Files to scan.
        standards: Compliance standards checked with the built-in tables.
        adapter: Filesystem adapter (defaults to one rooted at the cwd).

    Returns:
        The merged ValidationResult; ``metadata["documents"]`` carries each
        file's security summary and one compliance status per standard.
    """
    adapter = adapter or FileSystemAdapter()

    try:
        documents = adapter.load_documents(paths)
    except DocumentLoadError as e:
        logger.warning("Could not load %s: %s", e.source, e.message)
        return _fatal("FILE_LOAD_ERROR", e.message, file=e.source, line=e.line)

    rules = _security_rules([], standards, use_default_rules=True)
    scans = [_scan(document, rules) for document in documents]

    merged = merge_results(scans)
    report: list[dict[str, Any]] = []
    for document, scan in zip(documents, scans):
        entry: dict[str, Any] = {"file": document.path, "summary": scan.summary.model_dump()}
        if scan.compliance_by_standard:
            entry["compliance"] = [
                status.model_dump(mode="json") for status in scan.compliance_by_standard
            ]
        report.append(entry)

    return merged.model_copy(
        update={
            "metadata": {
                **merged.metadata,
                "files": [d.path for d in documents],
                "documents": report,
            }
        }
    )


def create_missing_documents(
    config: ProjectConfig,
    files: Sequence[Path | str] | None = None,
    adapter: FileSystemAdapter | None = None,
) -> list[str]:
    """
    Write an empty skeleton for every listed document that does not exist.

    The skeleton comes from ``config.required_keys`` when set, otherwise from
    the merged key layout of the documents that do exist. Every value in it
    is ``None``.

    Args:
        config: Project configuration.
        files: Documents to check instead of the configured ones.
        adapter: Filesystem adapter (defaults to one rooted at the cwd).

    Returns:
        Paths of the documents created, in listed order.

    Raises:
        DocumentLoadError: If an existing document cannot be loaded or a
            skeleton cannot be written.
    """
    adapter = adapter or FileSystemAdapter()
    paths = [str(f) for f in files] if files else config.files_to_compare()

    missing = [path for path in paths if not adapter.exists(path)]
    if not missing:
        return []

    existing = adapter.load_documents([path for path in paths if path not in missing])
    skeleton = empty_structure([d.content for d in existing], config.required_keys)

    for path in missing:
        adapter.write_document(path, skeleton)
        logger.info("Created %s with %d top-level key(s)", path, len(skeleton))

    return missing


def _document_rules(config: ProjectConfig, document_count: int) -> list[ValidationRule]:
    rules = config.document_rules()
    # Equality analysis needs two documents to check required keys
    if document_count < 2 and config.required_keys:
        rules.insert(
            0,
            StructureRule(id="required-keys", required_properties=list(config.required_keys)),
        )
    return rules


def _security_rules(
    rules: Sequence[BaseSecurityRule],
    standards: Sequence[ComplianceStandard | str],
    use_default_rules: bool,
) -> list[BaseSecurityRule]:
    combined: list[BaseSecurityRule] = list(DEFAULT_SECURITY_RULES) if use_default_rules else []
    combined.extend(rules)
    for standard in standards:
        combined.extend(compliance_rules(standard))
    return combined


def _scan(document: ConfigDocument, rules: Sequence[BaseSecurityRule]) -> SecurityValidationResult:
    context = SecurityContext(file_path=document.path, permissions=document.permissions)
    return validate_security(document.raw_text or "", rules, context)


def _fatal(code: str, message: str, **context: Any) -> ValidationResult:
    return ValidationResult.from_findings([Finding(code=code, message=message, context=context)])
