"""
Dot-path lookups.

get_path(data, "address.city")      → value or None
find_rule(schema, "address.city")   → leaf rule dict or None

A key that literally contains dots ({"a.b": 1}) wins over the nested walk.
An empty path, or one with empty segments ("a..b"), resolves to nothing.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional

_MISSING = object()


def split_path(path: str) -> list[str]:
    return path.split(".") if path else []


def _step(current: Any, segment: str) -> Any:
    if not segment:
        return _MISSING
    if isinstance(current, Mapping):
        return current.get(segment, _MISSING)
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        try:
            return current[int(segment)]
        except (ValueError, IndexError):
            return _MISSING
    return _MISSING


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """Resolve a dot-delimited path through nested mappings and lists."""
    if not path:
        return default
    if isinstance(data, Mapping) and path in data:
        return data[path]

    current = data
    for segment in split_path(path):
        current = _step(current, segment)
        if current is _MISSING:
            return default
    return current


def is_leaf_rule(node: Any) -> bool:
    return isinstance(node, dict) and "type" in node


def find_rule(schema: Mapping[str, Any], path: str) -> Optional[dict]:
    """
    Walk a normalized schema along `path` and return the leaf rule there.

    Groups (mappings without a `type` key) are traversed. A path that ends on a
    group, or that runs through a leaf, is not a schema field.
    """
    if not path:
        return None
    if is_leaf_rule(schema.get(path)):
        return schema[path]

    node: Any = schema
    for segment in split_path(path):
        if not segment or not isinstance(node, Mapping) or is_leaf_rule(node):
            return None
        node = node.get(segment)

    return node if is_leaf_rule(node) else None
