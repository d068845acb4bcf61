"""Abstract key-value store client used by ``RedisStore``.

The capability set is exactly what the session store needs: single-key
GET/SET/EXPIRE, bulk DEL/MGET, and one SCAN page at a time.  Replies are
always ``str`` (or ``None`` for a missing value); concrete clients decode
``bytes`` replies and translate driver exceptions into
``StoreCommandError``.

Classes
-------
- StoreClient  — abstract base for all driver adapters
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Union

from redis_session_store.errors import SerializationError

Cursor = Union[int, str]

INITIAL_CURSOR: Cursor = 0


def decode_reply(value: object) -> str | None:
    """Return ``value`` as ``str``, decoding ``bytes`` as UTF-8.

    Raises
    ------
    SerializationError
        If ``value`` is not valid UTF-8.
    """
    if value is None:
        return None
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError("parse", reason=f"reply is not UTF-8: {exc}") from exc
    return str(value)


def is_terminal_cursor(cursor: object) -> bool:
    """True when ``cursor`` marks the end of a SCAN iteration.

    Drivers report the terminal cursor as ``0``, ``"0"`` or ``b"0"``.
    """
    return cursor in (0, "0", b"0")


class StoreClient(ABC):
    """Uniform async command interface over a Redis-compatible store."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value at ``key`` or ``None`` if absent."""

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        """Overwrite ``key`` with ``value``, expiring after ``ttl`` seconds if given."""

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> bool:
        """Refresh the expiry of ``key``.

        Returns
        -------
        bool
            False when ``key`` did not exist.
        """

    @abstractmethod
    async def delete(self, keys: Sequence[str]) -> int:
        """Delete ``keys`` in one command and return how many existed."""

    @abstractmethod
    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        """Return the values of ``keys`` in order, ``None`` for missing ones."""

    @abstractmethod
    async def scan(self, cursor: Cursor, match: str, count: int) -> tuple[Cursor, list[str]]:
        """Run one SCAN page.

        Returns
        -------
        tuple
            ``(next_cursor, keys)``.  ``next_cursor`` is terminal (see
            ``is_terminal_cursor``) on the last page.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying connection pool."""


__all__ = ["Cursor", "INITIAL_CURSOR", "StoreClient", "decode_reply", "is_terminal_cursor"]
