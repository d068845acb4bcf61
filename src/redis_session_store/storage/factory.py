"""Select the ``StoreClient`` adapter for a driver instance.

The choice is made once, by type, when the store is constructed.
"""
from __future__ import annotations

import redis as redis_module
import redis.asyncio as redis_asyncio

from redis_session_store.errors import ConfigurationError
from redis_session_store.storage.async_redis import AsyncRedisClient
from redis_session_store.storage.base import StoreClient
from redis_session_store.storage.redis import SyncRedisClient


def adapt_client(client: object) -> StoreClient:
    """Return a ``StoreClient`` for ``client``.

    Parameters
    ----------
    client:
        A ``StoreClient`` (returned unchanged), a ``redis.asyncio.Redis``
        or a ``redis.Redis``.

    Raises
    ------
    ConfigurationError
        If ``client`` is none of the supported types.
    """
    if isinstance(client, StoreClient):
        return client
    if isinstance(client, redis_asyncio.Redis):
        return AsyncRedisClient(client)
    if isinstance(client, redis_module.Redis):
        return SyncRedisClient(client)
    raise ConfigurationError(
        f"Unsupported client type {type(client).__name__}; expected a StoreClient, "
        "redis.asyncio.Redis or redis.Redis"
    )


__all__ = ["adapt_client"]
