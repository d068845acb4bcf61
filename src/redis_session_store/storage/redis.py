"""``StoreClient`` adapter for blocking ``redis.Redis`` clients.

Each command runs in the default executor via ``asyncio.to_thread`` so the
event loop is never blocked while the driver waits on the network.

Classes
-------
- SyncRedisClient  — redis.Redis-backed store client
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Sequence

import redis as redis_module
from redis.exceptions import RedisError

from redis_session_store.errors import SerializationError, StoreCommandError
from redis_session_store.storage.base import Cursor, StoreClient, decode_reply


class SyncRedisClient(StoreClient):
    """Issue session store commands through a blocking ``redis.Redis``.

    Parameters
    ----------
    client:
        A ``redis.Redis`` instance; it must be safe to call from worker
        threads, which the default connection pool is.
    """

    def __init__(self, client: redis_module.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> SyncRedisClient:
        """Build an adapter around ``redis.Redis.from_url(url)``."""
        kwargs.setdefault("decode_responses", True)
        return cls(redis_module.Redis.from_url(url, **kwargs))

    @property
    def raw(self) -> redis_module.Redis:
        return self._client

    async def _run(self, command: str, call: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.to_thread(call, *args, **kwargs)
        except RedisError as exc:
            raise StoreCommandError(command, str(exc)) from exc
        except UnicodeDecodeError as exc:
            raise SerializationError(
                "parse", reason=f"{command} reply is not UTF-8: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # StoreClient interface
    # ------------------------------------------------------------------

    async def get(self, key: str) -> str | None:
        return decode_reply(await self._run("GET", self._client.get, key))

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        if ttl is not None:
            await self._run("SET", self._client.set, key, value, ex=ttl)
        else:
            await self._run("SET", self._client.set, key, value)

    async def expire(self, key: str, ttl: int) -> bool:
        return bool(await self._run("EXPIRE", self._client.expire, key, ttl))

    async def delete(self, keys: Sequence[str]) -> int:
        if not keys:
            return 0
        return int(await self._run("DEL", self._client.delete, *keys))

    async def mget(self, keys: Sequence[str]) -> list[str | None]:
        if not keys:
            return []
        values = await self._run("MGET", self._client.mget, list(keys))
        return [decode_reply(value) for value in values]

    async def scan(self, cursor: Cursor, match: str, count: int) -> tuple[Cursor, list[str]]:
        next_cursor, keys = await self._run(
            "SCAN", self._client.scan, cursor=int(cursor), match=match, count=count
        )
        return next_cursor, [str(decode_reply(key)) for key in keys]

    async def close(self) -> None:
        await asyncio.to_thread(self._client.close)

    def __repr__(self) -> str:
        return f"SyncRedisClient(client={self._client!r})"


__all__ = ["SyncRedisClient"]
