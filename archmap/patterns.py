"""Glob matching over repository-relative POSIX paths."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Optional, Pattern, Sequence, Tuple

PROD = "PROD"
TEST = "TEST"

_TEST_FILE_RE = re.compile(r"(^|/)[^/]+\.(test|spec)\.[^/]+$")
_PY_TEST_FILE_RE = re.compile(r"(^|/)(test_[^/]*\.py|[^/]*_test\.py|conftest\.py)$")


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives, e.g. ``src/*.{ts,tsx}``."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    depth = 0
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                end = index
                break
    else:
        return [pattern]

    head, body, tail = pattern[:start], pattern[start + 1 : end], pattern[end + 1 :]
    options: List[str] = []
    depth = 0
    current: List[str] = []
    for char in body:
        if char == "," and depth == 0:
            options.append("".join(current))
            current = []
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        current.append(char)
    options.append("".join(current))

    expanded: List[str] = []
    for option in options:
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _translate(pattern: str) -> str:
    parts: List[str] = []
    index = 0
    while index < len(pattern):
        if pattern.startswith("**/", index):
            # zero or more whole directories
            parts.append("(?:.*/)?")
            index += 3
        elif pattern.startswith("**", index):
            parts.append(".*")
            index += 2
        elif pattern[index] == "*":
            parts.append("[^/]*")
            index += 1
        elif pattern[index] == "?":
            parts.append("[^/]")
            index += 1
        else:
            parts.append(re.escape(pattern[index]))
            index += 1
    return "^" + "".join(parts) + "$"


@lru_cache(maxsize=1024)
def glob_to_regex(pattern: str) -> Tuple[Pattern[str], ...]:
    """Compile a glob (with brace alternatives) to anchored regular expressions."""
    return tuple(re.compile(_translate(option)) for option in expand_braces(pattern))


def matches(path: str, pattern: str) -> bool:
    return any(regex.match(path) for regex in glob_to_regex(pattern))


def first_match(path: str, patterns: Sequence[str]) -> Optional[int]:
    """Return the index of the first pattern matching ``path``."""
    for index, pattern in enumerate(patterns):
        if matches(path, pattern):
            return index
    return None


def matches_any(path: str, patterns: Sequence[str]) -> bool:
    return first_match(path, patterns) is not None


def classify_path_kind(path: str) -> str:
    """Label a path as test code or production code."""
    wrapped = f"/{path}"
    if "/test/" in wrapped or "/tests/" in wrapped:
        return TEST
    if "__tests__" in path or "__fixtures__" in path or "/fixtures/" in wrapped:
        return TEST
    if _TEST_FILE_RE.search(path) or _PY_TEST_FILE_RE.search(path):
        return TEST
    return PROD


__all__ = [
    "PROD",
    "TEST",
    "classify_path_kind",
    "expand_braces",
    "first_match",
    "glob_to_regex",
    "matches",
    "matches_any",
]
