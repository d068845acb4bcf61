"""Tagged representation of the raw value stored under a session key.

A key holds either a serialized session or the tombstone sentinel written
by soft-delete.  Decoding yields ``Record`` or ``Tombstone`` so that the
rest of the store branches on type, never on string comparison.

The sentinel is the bare text ``TOMBSTONE``.  ``JSONSerializer`` cannot
produce it (JSON strings are quoted), but a custom serializer that emits
that exact text for a real session would be read back as a tombstone.

Classes
-------
- Tombstone  — marker for a recently destroyed session
- Record     — a decoded session payload
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from redis_session_store.errors import SerializationError
from redis_session_store.session.serializer import Serializer

TOMBSTONE_SENTINEL = "TOMBSTONE"


@dataclass(frozen=True)
class Tombstone:
    """A soft-deleted session."""

    raw: str = TOMBSTONE_SENTINEL


@dataclass
class Record:
    """A live session payload."""

    session: dict[str, Any] = field(default_factory=dict)


StoredValue = Union[Record, Tombstone]


def is_tombstone_payload(raw: str | None) -> bool:
    """True when ``raw`` is the tombstone sentinel."""
    return raw == TOMBSTONE_SENTINEL


def decode_value(
    raw: str,
    serializer: Serializer,
    *,
    tombstones: bool,
    session_id: str | None = None,
) -> StoredValue:
    """Decode ``raw`` into a ``Record`` or, when enabled, a ``Tombstone``.

    Raises
    ------
    SerializationError
        If the serializer cannot parse ``raw``.
    """
    if tombstones and is_tombstone_payload(raw):
        return Tombstone()
    try:
        return Record(serializer.parse(raw))
    except Exception as exc:
        raise SerializationError("parse", session_id, str(exc)) from exc


def encode_session(
    session: dict[str, Any],
    serializer: Serializer,
    session_id: str | None = None,
) -> str:
    """Stringify ``session`` with ``serializer``.

    Raises
    ------
    SerializationError
        If the serializer fails.
    """
    try:
        return serializer.stringify(session)
    except Exception as exc:
        raise SerializationError("stringify", session_id, str(exc)) from exc


__all__ = [
    "TOMBSTONE_SENTINEL",
    "Tombstone",
    "Record",
    "StoredValue",
    "is_tombstone_payload",
    "decode_value",
    "encode_session",
]
