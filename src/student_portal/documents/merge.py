"""Merge-patch semantics for the document store.

A patch maps dotted field paths (``days.2025-10-28.hasIn``) to values. Paths
are applied into nested objects, mapping values are deep-merged, and two
sentinels are resolved at write time: ``SERVER_TIMESTAMP`` and ``ArrayUnion``.
Fields not named by the patch are left untouched.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Mapping


class ServerTimestamp:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = ServerTimestamp()


class ArrayUnion:
    """Append items that are not already present in the target array."""

    def __init__(self, *items: Any):
        self.items = list(items)

    def __repr__(self) -> str:
        return f"ArrayUnion({self.items!r})"


def split_path(path: str) -> list[str]:
    parts = path.split(".")
    if any(not p for p in parts):
        raise ValueError(f"Invalid field path: {path!r}")
    return parts


def _resolve(value: Any, existing: Any, server_time: datetime) -> Any:
    if isinstance(value, ServerTimestamp):
        return server_time
    if isinstance(value, ArrayUnion):
        result = list(existing) if isinstance(existing, list) else []
        for item in value.items:
            item = _resolve(item, None, server_time)
            if item not in result:
                result.append(item)
        return result
    if isinstance(value, Mapping):
        target = dict(existing) if isinstance(existing, dict) else {}
        for key, sub in value.items():
            target[key] = _resolve(sub, target.get(key), server_time)
        return target
    if isinstance(value, list):
        return [_resolve(v, None, server_time) for v in value]
    return copy.deepcopy(value)


def apply_merge(body: Mapping[str, Any], patch: Mapping[str, Any], *, server_time: datetime) -> dict:
    """Return a new body with *patch* merged in. *body* is not mutated."""
    result = copy.deepcopy(dict(body))
    for path, value in patch.items():
        parts = split_path(path)
        node = result
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        leaf = parts[-1]
        node[leaf] = _resolve(value, node.get(leaf), server_time)
    return result
