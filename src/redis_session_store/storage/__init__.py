"""Store client subpackage.

Public surface
--------------
- StoreClient       — abstract async command interface
- AsyncRedisClient  — adapter for ``redis.asyncio.Redis``
- SyncRedisClient   — adapter for blocking ``redis.Redis``
- KeyScanner        — SCAN-based key enumeration
- adapt_client      — pick the adapter for a driver instance
"""
from __future__ import annotations

from redis_session_store.storage.async_redis import AsyncRedisClient
from redis_session_store.storage.base import StoreClient
from redis_session_store.storage.factory import adapt_client
from redis_session_store.storage.redis import SyncRedisClient
from redis_session_store.storage.scanner import KeyScanner

__all__ = [
    "StoreClient",
    "AsyncRedisClient",
    "SyncRedisClient",
    "KeyScanner",
    "adapt_client",
]
