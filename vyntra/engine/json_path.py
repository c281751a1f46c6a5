"""Restricted JSONPath resolution against an execution context.

Supported forms: ``$``, ``$.a.b``, ``$.items[0]``, ``$["key"]``, ``$['key']``.
Missing data never raises; it resolves to the caller's default.
"""

from __future__ import annotations

import re
from typing import Any


class Missing:
    """Marker for a path that resolved to nothing (distinct from ``None``)."""

    _instance: Missing | None = None

    def __new__(cls) -> Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = Missing()

_TOKEN_PATTERN = re.compile(r"""([^\[.\]]+)|\[(\d+|"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')\]""")
_DIGITS = re.compile(r"^\d+$")


def tokenize_json_path(path: str) -> list[str]:
    """Split a ``$``-rooted path into key / index tokens."""
    if path.startswith("$."):
        normalized = path[2:]
    elif path.startswith("$"):
        normalized = path[1:]
    else:
        normalized = path

    tokens: list[str] = []
    for match in _TOKEN_PATTERN.finditer(normalized):
        if match.group(1):
            tokens.append(match.group(1))
        elif match.group(2):
            raw = match.group(2)
            tokens.append(raw if _DIGITS.match(raw) else raw[1:-1])
    return tokens


def resolve_json_path(data: Any, path: str | None, default: Any = None) -> Any:
    """Resolve ``path`` against ``data``.

    Returns ``default`` when the path does not start with ``$``, a key is absent,
    an index is out of range, or an intermediate value is not a container.
    """
    if not path or path == "$":
        return data
    if not isinstance(path, str) or not path.startswith("$"):
        return default

    current: Any = data
    for token in tokenize_json_path(path):
        if isinstance(current, list) and _DIGITS.match(token):
            index = int(token)
            if index >= len(current):
                return default
            current = current[index]
            continue
        if isinstance(current, dict) and token in current:
            current = current[token]
            continue
        return default
    return current
