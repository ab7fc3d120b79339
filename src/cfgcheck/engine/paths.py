"""
Key path helpers over parsed configuration trees.

A key path joins mapping keys with ``.``; arrays are leaves and are never
descended into by key extraction.
"""

from __future__ import annotations

from typing import Any


class _Missing:
    """Sentinel for a value that is absent, as opposed to present and ``None``."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def join_path(prefix: str, key: Any) -> str:
    """Append a key to a dotted path."""
    return f"{prefix}.{key}" if prefix else str(key)


def extract_keys(tree: Any, prefix: str = "") -> list[str]:
    """
    Collect every key path in a tree.

    Each mapping member contributes its own path; members that are themselves
    mappings are recursed into. Arrays, ``None`` and scalars terminate at
    their own path. A non-mapping root yields no keys.

    Args:
        tree: Parsed document (or any subtree).
        prefix: Path of ``tree`` inside the document.

    Returns:
        Key paths in document order, without duplicates.

    Example:
        >>> extract_keys({"db": {"host": "x", "port": 5432}, "tags": [1]})
        ['db', 'db.host', 'db.port', 'tags']
    """
    if not isinstance(tree, dict):
        return []

    keys: list[str] = []
    for key, value in tree.items():
        path = join_path(prefix, key)
        keys.append(path)
        if isinstance(value, dict):
            keys.extend(extract_keys(value, path))

    return list(dict.fromkeys(keys))


def get_nested_value(tree: Any, path: str, default: Any = MISSING) -> Any:
    """
    Resolve a dotted key path.

    Numeric segments index into arrays. Returns ``default`` when any segment
    is absent.
    """
    current = tree
    for part in path.split("."):
        if isinstance(current, dict):
            if part in current:
                current = current[part]
                continue
            # YAML allows non-string keys such as ports or booleans
            matched = [k for k in current if str(k) == part]
            if not matched:
                return default
            current = current[matched[0]]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return default
    return current


def has_key_path(tree: Any, path: str) -> bool:
    """Whether the key path resolves to a present value (``None`` counts as present)."""
    return get_nested_value(tree, path) is not MISSING


def calculate_depth(tree: Any, current_depth: int = 0) -> int:
    """
    Mapping nesting depth.

    ``{}`` is 0, ``{"a": 1}`` is 1, ``{"a": {"b": 1}}`` is 2. Arrays count as
    leaves.
    """
    if not isinstance(tree, dict):
        return current_depth

    depths = [calculate_depth(value, current_depth + 1) for value in tree.values()]
    return max([current_depth, *depths])


def is_empty_value(value: Any) -> bool:
    """``None``, blank strings, empty arrays and empty mappings are empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False
