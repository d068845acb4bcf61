"""Mapping between session IDs and storage keys.

Classes
-------
- KeyCodec  — prefix-based session ID <-> key translation
"""
from __future__ import annotations

DEFAULT_PREFIX = "sess:"


class KeyCodec:
    """Translate session IDs to storage keys and back.

    Keys are ``<prefix><session_id>`` with no escaping.  An empty prefix is
    legal and disables namespacing altogether.

    Parameters
    ----------
    prefix:
        String prepended to every session ID.  Defaults to ``"sess:"``.
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def pattern(self) -> str:
        """SCAN ``MATCH`` pattern covering every key under the prefix."""
        return f"{self._prefix}*"

    def key_for(self, session_id: str) -> str:
        """Return the storage key for ``session_id``."""
        return f"{self._prefix}{session_id}"

    def id_from(self, key: str) -> str:
        """Return the session ID encoded in ``key``."""
        return key[len(self._prefix):]

    def __repr__(self) -> str:
        return f"KeyCodec(prefix={self._prefix!r})"


__all__ = ["DEFAULT_PREFIX", "KeyCodec"]
