"""Structural merge of session payloads.

Used by merge-on-write: when a stored session was modified by another
writer since the incoming copy was read, the incoming session is merged
onto the stored one before writing.

Rules, applied key by key in the incoming mapping's order:

- a key present only in the stored mapping is kept;
- when both sides hold a mapping, they are merged recursively;
- otherwise the incoming value wins (lists are treated as scalars).

Neither argument is mutated.
"""
from __future__ import annotations

import copy
from functools import reduce
from typing import Any, Mapping


def _merge_entry(acc: dict[str, Any], item: tuple[str, Any]) -> dict[str, Any]:
    key, incoming = item
    current = acc.get(key)
    if isinstance(current, Mapping) and isinstance(incoming, Mapping):
        acc[key] = deep_merge(current, incoming)
    else:
        acc[key] = copy.deepcopy(incoming)
    return acc


def deep_merge(base: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new mapping with ``incoming`` merged onto ``base``."""
    return reduce(_merge_entry, incoming.items(), copy.deepcopy(dict(base)))


__all__ = ["deep_merge"]
