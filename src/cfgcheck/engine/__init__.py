"""
Engine layer for cfgcheck.

Contains the equality analyzer, the rule engine, the file-level runners and
the empty-document skeleton builder.
"""

from cfgcheck.engine.equality import KeyEqualityAnalyzer, compare_documents
from cfgcheck.engine.pipeline import RuleEngine, merge_results, validate_document
from cfgcheck.engine.runner import create_missing_documents, run_audit, run_validation
from cfgcheck.engine.structure import build_structure, empty_structure, merge_structures

__all__ = [
    "KeyEqualityAnalyzer",
    "RuleEngine",
    "build_structure",
    "compare_documents",
    "create_missing_documents",
    "empty_structure",
    "merge_results",
    "merge_structures",
    "run_audit",
    "run_validation",
    "validate_document",
]
