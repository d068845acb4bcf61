"""Redis-backed session store.

``RedisStore`` implements the session middleware storage contract
(get/set/touch/destroy/clear/length/ids/all) on top of a ``StoreClient``.
It keeps no state between calls besides its configuration; every
operation is a short sequence of store commands.

Soft-delete lineage
-------------------
With ``tombstones=True``, ``destroy`` writes a short-lived tombstone in
place of the session and ``set`` never writes over a tombstone, so a
request that was in flight when the session was destroyed cannot bring it
back.  With ``merge=True``, ``set`` reads the stored record and, when its
``lastModified`` stamp differs from the incoming one, deep-merges the
incoming session onto it.  The read and the write are separate commands:
this narrows lost-update races but does not close them.

Classes
-------
- TouchResult  — outcome of ``touch``
- RedisStore   — the session store
"""
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable

from redis_session_store.config import StoreOptions, build_options
from redis_session_store.session.keys import KeyCodec
from redis_session_store.session.merge import deep_merge
from redis_session_store.session.record import (
    TOMBSTONE_SENTINEL,
    Record,
    StoredValue,
    Tombstone,
    decode_value,
    encode_session,
    is_tombstone_payload,
)
from redis_session_store.session.ttl import TTLPolicy
from redis_session_store.storage.async_redis import AsyncRedisClient
from redis_session_store.storage.base import StoreClient
from redis_session_store.storage.factory import adapt_client
from redis_session_store.storage.scanner import KeyScanner

logger = logging.getLogger(__name__)

LAST_MODIFIED_FIELD = "lastModified"
ID_FIELD = "id"


class TouchResult(str, Enum):
    """Outcome of ``RedisStore.touch``."""

    OK = "OK"
    EXPIRED = "EXPIRED"


class RedisStore:
    """Persist session mappings in a Redis-compatible store.

    Parameters
    ----------
    client:
        A ``StoreClient``, ``redis.asyncio.Redis`` or ``redis.Redis``.
    options:
        Base option set.  Keyword ``overrides`` are applied on top.
    clock:
        Returns the current epoch time in seconds; used for cookie expiry
        and ``lastModified`` stamps.

    Raises
    ------
    ConfigurationError
        If ``client`` is unsupported or an option is invalid.
    """

    def __init__(
        self,
        client: object,
        options: StoreOptions | None = None,
        *,
        clock: Callable[[], float] = time.time,
        **overrides: Any,
    ) -> None:
        self.options = build_options(options, **overrides)
        self.client: StoreClient = adapt_client(client)
        self._clock = clock
        self._keys = KeyCodec(self.options.prefix)
        self._ttl = TTLPolicy(self.options.ttl, clock=clock)
        self._scanner = KeyScanner(self.client, page_size=self.options.scan_count)

    @classmethod
    def from_url(
        cls,
        url: str,
        options: StoreOptions | None = None,
        **overrides: Any,
    ) -> RedisStore:
        """Create a store with a ``redis.asyncio`` connection to ``url``."""
        return cls(AsyncRedisClient.from_url(url), options, **overrides)

    # ------------------------------------------------------------------
    # Read-only configuration
    # ------------------------------------------------------------------

    @property
    def prefix(self) -> str:
        return self._keys.prefix

    @property
    def serializer(self) -> Any:
        return self.options.serializer

    @property
    def key_codec(self) -> KeyCodec:
        return self._keys

    # ------------------------------------------------------------------
    # Single-session operations
    # ------------------------------------------------------------------

    async def get(self, session_id: str) -> dict[str, Any] | None:
        """Return the session stored for ``session_id``.

        Returns
        -------
        dict or None
            ``None`` when no session exists or it has been tombstoned.

        Raises
        ------
        SerializationError
            If the stored payload cannot be parsed.
        StoreCommandError
            If the GET fails.
        """
        value = await self._load(session_id)
        if isinstance(value, Record):
            return value.session
        return None

    async def set(self, session_id: str, session: dict[str, Any]) -> None:
        """Store ``session`` under ``session_id``.

        A computed TTL ``<= 0`` destroys the session instead.  With
        ``disable_ttl`` the TTL is not computed and the record never
        expires.

        Raises
        ------
        ConfigurationError
            If the ``ttl`` option is unusable.
        SerializationError
            If ``session`` cannot be stringified.
        StoreCommandError
            If a store command fails.
        """
        ttl: int | None = None
        if not self.options.disable_ttl:
            ttl = self._ttl.compute(session)
            if ttl <= 0:
                logger.debug("RedisStore: ttl %d for %r, destroying", ttl, session_id)
                await self.destroy(session_id)
                return

        if self.options.tombstones or self.options.merge:
            current = await self._load(session_id, tombstones=True)
            if isinstance(current, Tombstone):
                logger.debug("RedisStore: %r is tombstoned, write skipped", session_id)
                return
            if self.options.merge:
                session = self._merge(current, session)

        payload = encode_session(session, self.options.serializer, session_id)
        await self.client.set(self._keys.key_for(session_id), payload, ttl)
        logger.debug("RedisStore: set %r (ttl=%r)", session_id, ttl)

    async def touch(self, session_id: str, session: dict[str, Any]) -> TouchResult:
        """Refresh the expiry of ``session_id`` without rewriting its value.

        Returns
        -------
        TouchResult
            ``OK`` on success or when touching is disabled, ``EXPIRED`` when
            the key no longer existed, held a tombstone, or the new TTL was
            ``<= 0`` (in which case the session is destroyed).
        """
        if self.options.disable_touch or self.options.disable_ttl:
            return TouchResult.OK

        ttl = self._ttl.compute(session)
        if ttl <= 0:
            await self.destroy(session_id)
            return TouchResult.EXPIRED

        if self.options.tombstones:
            current = await self._load(session_id, tombstones=True)
            if not isinstance(current, Record):
                logger.debug("RedisStore: touch on destroyed or missing %r", session_id)
                return TouchResult.EXPIRED

        refreshed = await self.client.expire(self._keys.key_for(session_id), ttl)
        if not refreshed:
            logger.debug("RedisStore: touch on missing key for %r", session_id)
            return TouchResult.EXPIRED
        return TouchResult.OK

    async def destroy(self, session_id: str) -> None:
        """Delete ``session_id``, or tombstone it when ``tombstones`` is on."""
        key = self._keys.key_for(session_id)
        if self.options.tombstones:
            await self.client.set(key, TOMBSTONE_SENTINEL, self.options.tombstone_ttl)
            logger.debug("RedisStore: tombstoned %r", session_id)
        else:
            await self.client.delete([key])
            logger.debug("RedisStore: deleted %r", session_id)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    async def clear(self) -> int:
        """Delete every key under the prefix, tombstones included.

        Returns
        -------
        int
            Number of keys deleted.  ``0`` when the key-space was empty.
        """
        keys = await self._scanner.all_keys(self._keys.pattern)
        if not keys:
            return 0
        deleted = await self.client.delete(sorted(keys))
        logger.debug("RedisStore: cleared %d key(s)", deleted)
        return deleted

    async def length(self, *, include_tombstones: bool = False) -> int:
        """Return the number of stored sessions.

        Tombstoned keys are not counted unless ``include_tombstones``.
        """
        return len(await self._live_keys(include_tombstones=include_tombstones))

    async def ids(self, *, include_tombstones: bool = False) -> list[str]:
        """Return the IDs of all stored sessions, sorted."""
        keys = await self._live_keys(include_tombstones=include_tombstones)
        return [self._keys.id_from(key) for key in keys]

    async def all(self) -> list[dict[str, Any]]:
        """Return every stored session with its ID under ``"id"``.

        Keys that expired between SCAN and MGET, and tombstones, are
        skipped.
        """
        keys = sorted(await self._scanner.all_keys(self._keys.pattern))
        if not keys:
            return []
        values = await self.client.mget(keys)
        sessions: list[dict[str, Any]] = []
        for key, raw in zip(keys, values):
            if not raw:
                continue
            session_id = self._keys.id_from(key)
            value = decode_value(
                raw,
                self.options.serializer,
                tombstones=self.options.tombstones,
                session_id=session_id,
            )
            if isinstance(value, Tombstone):
                continue
            value.session[ID_FIELD] = session_id
            sessions.append(value.session)
        return sessions

    async def close(self) -> None:
        """Close the underlying client connection."""
        await self.client.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _load(self, session_id: str, *, tombstones: bool = False) -> StoredValue | None:
        """Fetch and decode the value for ``session_id``.

        Tombstones are returned only when ``tombstones`` is true; otherwise
        they read as ``None``.
        """
        raw = await self.client.get(self._keys.key_for(session_id))
        if not raw:
            return None
        value = decode_value(
            raw,
            self.options.serializer,
            tombstones=self.options.tombstones,
            session_id=session_id,
        )
        if isinstance(value, Tombstone) and not tombstones:
            return None
        return value

    async def _live_keys(self, *, include_tombstones: bool) -> list[str]:
        keys = sorted(await self._scanner.all_keys(self._keys.pattern))
        if not self.options.tombstones or include_tombstones or not keys:
            return keys
        values = await self.client.mget(keys)
        return [key for key, raw in zip(keys, values) if raw and not is_tombstone_payload(raw)]

    def _merge(self, current: StoredValue | None, incoming: dict[str, Any]) -> dict[str, Any]:
        if isinstance(current, Record) and (
            current.session.get(LAST_MODIFIED_FIELD) != incoming.get(LAST_MODIFIED_FIELD)
        ):
            merged = deep_merge(current.session, incoming)
        else:
            merged = dict(incoming)
        merged[LAST_MODIFIED_FIELD] = int(self._clock() * 1000)
        return merged

    def __repr__(self) -> str:
        return (
            f"RedisStore(prefix={self.prefix!r}, client={self.client!r}, "
            f"tombstones={self.options.tombstones!r}, merge={self.options.merge!r})"
        )


__all__ = ["ID_FIELD", "LAST_MODIFIED_FIELD", "RedisStore", "TouchResult"]
