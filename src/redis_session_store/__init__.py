"""redis-session-store — Redis-backed storage for HTTP session middleware.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import redis_session_store
>>> redis_session_store.__version__
'0.1.0'
"""
from __future__ import annotations

from redis_session_store.config import StoreOptions
from redis_session_store.errors import (
    ConfigurationError,
    SerializationError,
    SessionStoreError,
    StoreCommandError,
)
from redis_session_store.session.keys import KeyCodec
from redis_session_store.session.merge import deep_merge
from redis_session_store.session.record import TOMBSTONE_SENTINEL, Record, Tombstone
from redis_session_store.session.serializer import JSONSerializer, Serializer, YAMLSerializer
from redis_session_store.session.ttl import TTLPolicy
from redis_session_store.storage.async_redis import AsyncRedisClient
from redis_session_store.storage.base import StoreClient
from redis_session_store.storage.factory import adapt_client
from redis_session_store.storage.redis import SyncRedisClient
from redis_session_store.storage.scanner import KeyScanner
from redis_session_store.store import RedisStore, TouchResult

__version__: str = "0.1.0"

__all__ = [
    "__version__",
    # Store
    "RedisStore",
    "StoreOptions",
    "TouchResult",
    # Session building blocks
    "KeyCodec",
    "TTLPolicy",
    "Serializer",
    "JSONSerializer",
    "YAMLSerializer",
    "Record",
    "Tombstone",
    "TOMBSTONE_SENTINEL",
    "deep_merge",
    # Store clients
    "StoreClient",
    "AsyncRedisClient",
    "SyncRedisClient",
    "KeyScanner",
    "adapt_client",
    # Errors
    "SessionStoreError",
    "SerializationError",
    "StoreCommandError",
    "ConfigurationError",
]
