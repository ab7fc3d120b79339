"""
Empty document skeletons.

Builds a tree with every value set to ``None``, either from required key
paths or from the key layout of existing documents. Used to create the
documents a project lists but that do not exist yet.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def build_structure(required_keys: Sequence[str]) -> dict[str, Any]:
    """
    Nested skeleton from dotted key paths.

    Each path becomes nested mappings ending in a ``None`` leaf. A later path
    that runs through an existing leaf turns that leaf into a mapping; a later
    path ending on an existing branch replaces the branch with ``None``.

    Example:
        >>> build_structure(["database.host", "database.port", "debug"])
        {'database': {'host': None, 'port': None}, 'debug': None}
    """
    structure: dict[str, Any] = {}
    for key in required_keys:
        if not key:
            continue

        *parents, leaf = key.split(".")
        current = structure
        for part in parents:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]
        current[leaf] = None

    return structure


def merge_structures(structures: Sequence[Any]) -> dict[str, Any]:
    """
    Union of several trees' key layouts, with every leaf set to ``None``.

    Mappings are merged recursively in order; arrays and scalars are leaves.
    Non-mapping roots are skipped.

    Example:
        >>> merge_structures([{"a": {"b": 1}}, {"a": {"c": [2]}, "d": "x"}])
        {'a': {'b': None, 'c': None}, 'd': None}
    """
    merged: dict[Any, Any] = {}
    for structure in structures:
        if isinstance(structure, dict):
            _merge_into(merged, structure)
    return _null_leaves(merged)


def empty_structure(
    existing: Sequence[Any], required_keys: Sequence[str] = ()
) -> dict[str, Any]:
    """Skeleton from ``required_keys`` when there are any, else from ``existing`` trees."""
    if required_keys:
        return build_structure(required_keys)
    return merge_structures(existing)


def _merge_into(target: dict[Any, Any], source: dict[Any, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict):
            branch = target.get(key)
            if not isinstance(branch, dict):
                branch = target[key] = {}
            _merge_into(branch, value)
        else:
            target[key] = value


def _null_leaves(tree: dict[Any, Any]) -> dict[Any, Any]:
    return {
        key: _null_leaves(value) if isinstance(value, dict) else None
        for key, value in tree.items()
    }
