"""Session record building blocks: key codec, TTL policy, serializers,
tombstone-aware value decoding and structural merge."""
from __future__ import annotations

from redis_session_store.session.keys import DEFAULT_PREFIX, KeyCodec
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
from redis_session_store.session.serializer import JSONSerializer, Serializer, YAMLSerializer
from redis_session_store.session.ttl import DEFAULT_TTL_SECONDS, TTLPolicy

__all__ = [
    "DEFAULT_PREFIX",
    "DEFAULT_TTL_SECONDS",
    "KeyCodec",
    "TTLPolicy",
    "Serializer",
    "JSONSerializer",
    "YAMLSerializer",
    "TOMBSTONE_SENTINEL",
    "Record",
    "Tombstone",
    "StoredValue",
    "decode_value",
    "encode_session",
    "is_tombstone_payload",
    "deep_merge",
]
