"""Pluggable session payload serializers.

A serializer turns a session mapping into the string stored under its key
and back.  ``JSONSerializer`` is the default; ``YAMLSerializer`` is
available for stores shared with tooling that prefers YAML.

Classes
-------
- Serializer      — structural protocol every serializer satisfies
- JSONSerializer  — compact JSON encoding (default)
- YAMLSerializer  — PyYAML safe_dump / safe_load encoding
"""
from __future__ import annotations

import json
from typing import Any, Protocol, runtime_checkable

import yaml


@runtime_checkable
class Serializer(Protocol):
    """Anything with ``stringify`` and ``parse`` can serialize sessions."""

    def stringify(self, session: dict[str, Any]) -> str:
        ...

    def parse(self, raw: str) -> dict[str, Any]:
        ...


class JSONSerializer:
    """Encode sessions as compact JSON.

    Parameters
    ----------
    sort_keys:
        Emit object keys in sorted order.  Off by default so payloads keep
        the caller's key order.
    """

    def __init__(self, sort_keys: bool = False) -> None:
        self.sort_keys = sort_keys

    def stringify(self, session: dict[str, Any]) -> str:
        """Return the JSON text for ``session``.

        Raises
        ------
        TypeError
            If ``session`` holds values JSON cannot represent.
        """
        return json.dumps(session, separators=(",", ":"), sort_keys=self.sort_keys)

    def parse(self, raw: str) -> dict[str, Any]:
        """Decode ``raw`` into a session mapping.

        Raises
        ------
        json.JSONDecodeError
            If ``raw`` is not valid JSON.
        TypeError
            If the document is not a JSON object.
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return data

    def __repr__(self) -> str:
        return f"JSONSerializer(sort_keys={self.sort_keys!r})"


class YAMLSerializer:
    """Encode sessions as YAML documents."""

    def stringify(self, session: dict[str, Any]) -> str:
        return yaml.safe_dump(session, default_flow_style=False, allow_unicode=True, sort_keys=False)

    def parse(self, raw: str) -> dict[str, Any]:
        data = yaml.safe_load(raw)
        if not isinstance(data, dict):
            raise TypeError(f"expected a YAML mapping, got {type(data).__name__}")
        return data

    def __repr__(self) -> str:
        return "YAMLSerializer()"


__all__ = ["Serializer", "JSONSerializer", "YAMLSerializer"]
