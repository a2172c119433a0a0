"""
Dot-notation paths over a nested dict tree.

A path is split on every literal ``.``; there is no escaping, so a key that
itself contains a dot cannot be addressed. Empty segments are ordinary
empty-string keys: ``"a..b"`` is ``["a", "", "b"]``.
"""

from __future__ import annotations

from typing import Any

from .values import MISSING, ValueKind, kind_of


def split_path(path: str) -> list[str]:
    return path.split(".")


def walk(tree: dict[str, Any], segments: list[str]) -> dict[str, Any] | None:
    """
    Return the mapping that contains the last segment, descending through
    mappings only. None if any intermediate segment is absent or not a mapping.
    """
    current = tree
    for segment in segments[:-1]:
        child = current.get(segment, MISSING)
        if kind_of(child) is not ValueKind.MAPPING:
            return None
        current = child
    return current


def lookup(tree: dict[str, Any], path: str, default: Any = None) -> Any:
    segments = split_path(path)
    parent = walk(tree, segments)
    if parent is None:
        return default
    return parent.get(segments[-1], default)


def ensure_parent(tree: dict[str, Any], segments: list[str]) -> dict[str, Any]:
    """
    Like walk(), but paves the way: an intermediate segment that is absent or
    holds anything other than a mapping is replaced by a new empty mapping.
    """
    current = tree
    for segment in segments[:-1]:
        child = current.get(segment, MISSING)
        if kind_of(child) is not ValueKind.MAPPING:
            child = {}
            current[segment] = child
        current = child
    return current
