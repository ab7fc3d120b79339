"""
Wildcard, glob and text-location matching.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from pathlib import PurePath


def wildcard_to_regex(pattern: str) -> re.Pattern[str]:
    """
    Compile a key ignore pattern.

    ``*`` matches any run of characters (dots included); everything else is
    literal. The result is anchored at both ends.
    """
    parts = [re.escape(part) for part in pattern.split("*")]
    return re.compile("^" + ".*".join(parts) + "$")


def is_key_ignored(key: str, ignore_keys: Sequence[str]) -> bool:
    """
    Check a key path against ignore patterns.

    A pattern without ``*`` matches the key itself and every descendant
    (``db`` ignores ``db.host``).

    Args:
        key: Dotted key path.
        ignore_keys: Exact keys, branch prefixes or wildcard patterns.

    Returns:
        True if any pattern matches.
    """
    for pattern in ignore_keys:
        if "*" in pattern:
            if wildcard_to_regex(pattern).match(key):
                return True
        elif key == pattern or key.startswith(pattern + "."):
            return True
    return False


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """
    Compile a file glob.

    ``*`` and ``**`` match any characters including ``/``, ``?`` matches one
    character; everything else is literal.
    """
    regex: list[str] = []
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "*":
            regex.append(".*")
            while i + 1 < len(pattern) and pattern[i + 1] == "*":
                i += 1
        elif char == "?":
            regex.append(".")
        else:
            regex.append(re.escape(char))
        i += 1
    return re.compile("^" + "".join(regex) + "$")


def matches_file_pattern(file_path: str, pattern: str) -> bool:
    """
    Whether a file path matches a glob. A blank pattern matches nothing.

    Globs containing ``/`` match the whole path; others match the file name.
    """
    if not pattern or not pattern.strip():
        return False
    target = file_path if "/" in pattern else PurePath(file_path).name
    return glob_to_regex(pattern).match(target) is not None


def get_line_and_column(content: str, index: int) -> tuple[int, int]:
    """
    1-based line and column of a character offset.

    The column counts from the preceding newline, or the start of the text.
    """
    line = content.count("\n", 0, index) + 1
    column = index - content.rfind("\n", 0, index)
    return line, column


def find_pattern_matches(
    content: str, pattern: re.Pattern[str]
) -> Iterator[tuple[re.Match[str], int, int]]:
    """
    Yield every match with its line and column, zero-length ones included.

    Each call starts a fresh scan, so compiled patterns can be shared freely.
    """
    for match in pattern.finditer(content):
        line, column = get_line_and_column(content, match.start())
        yield match, line, column
