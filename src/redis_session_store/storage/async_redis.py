"""``StoreClient`` adapter for ``redis.asyncio`` clients.

Works with clients created with or without ``decode_responses``.

Classes
-------
- AsyncRedisClient  — redis.asyncio-backed store client
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Sequence

import redis.asyncio as redis_asyncio
from redis.exceptions import RedisError

from redis_session_store.errors import SerializationError, StoreCommandError
from redis_session_store.storage.base import Cursor, StoreClient, decode_reply


class AsyncRedisClient(StoreClient):
    """Issue session store commands through a ``redis.asyncio.Redis``.

    Parameters
    ----------
    client:
        A connected (or lazily connecting) ``redis.asyncio.Redis``.
    """

    def __init__(self, client: redis_asyncio.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> AsyncRedisClient:
        """Build an adapter around ``redis.asyncio.Redis.from_url(url)``."""
        kwargs.setdefault("decode_responses", True)
        return cls(redis_asyncio.Redis.from_url(url, **kwargs))

    @property
    def raw(self) -> redis_asyncio.Redis:
        return self._client

    async def _run(self, command: str, call: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        try:
            return await call(*args, **kwargs)
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
        await self._client.aclose()

    def __repr__(self) -> str:
        return f"AsyncRedisClient(client={self._client!r})"


__all__ = ["AsyncRedisClient"]
