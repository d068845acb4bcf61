"""Cursor-based enumeration of every key under a pattern.

Only SCAN is used; KEYS would block a shared server for the duration of a
full keyspace walk.  SCAN may return a key more than once and may or may
not reflect keys written or deleted while the iteration runs, so the
result is deduplicated and is not a point-in-time snapshot.

Classes
-------
- KeyScanner  — accumulates SCAN pages into a set of keys
"""
from __future__ import annotations

import logging

from redis_session_store.storage.base import INITIAL_CURSOR, StoreClient, is_terminal_cursor

logger = logging.getLogger(__name__)


class KeyScanner:
    """Collect all keys matching a pattern using repeated SCAN pages.

    Parameters
    ----------
    client:
        Store client issuing the SCAN commands.
    page_size:
        ``COUNT`` hint for each page.
    """

    def __init__(self, client: StoreClient, page_size: int = 100) -> None:
        self._client = client
        self._page_size = page_size

    async def all_keys(self, pattern: str) -> set[str]:
        """Return every key matching ``pattern``.

        A failing page propagates its ``StoreCommandError`` immediately;
        no partial result is returned.
        """
        keys: set[str] = set()
        cursor = INITIAL_CURSOR
        pages = 0
        while True:
            cursor, page = await self._client.scan(cursor, pattern, self._page_size)
            keys.update(page)
            pages += 1
            if is_terminal_cursor(cursor):
                break
        logger.debug("KeyScanner: %d key(s) for %r in %d page(s)", len(keys), pattern, pages)
        return keys

    def __repr__(self) -> str:
        return f"KeyScanner(page_size={self._page_size!r})"


__all__ = ["KeyScanner"]
