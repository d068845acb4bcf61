"""Lifecycle tests for RedisStore against fakeredis.

Both driver flavours are exercised: ``redis.asyncio`` through
``fakeredis.aioredis.FakeRedis`` and blocking ``redis.Redis`` through
``fakeredis.FakeRedis``.  Both clients share one in-memory server, so
TTLs and raw values can be inspected directly.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from redis_session_store import (
    ConfigurationError,
    RedisStore,
    SerializationError,
    TouchResult,
    YAMLSerializer,
)
from redis_session_store.storage.async_redis import AsyncRedisClient
from redis_session_store.storage.redis import SyncRedisClient


def expires_in(seconds: float) -> str:
    """Return an ISO-8601 cookie expiry ``seconds`` from now."""
    return (datetime.now(timezone.utc) + timedelta(seconds=seconds)).isoformat()


async def _lifecycle(store: RedisStore, async_redis: object) -> None:
    assert await store.clear() == 0

    await store.set("123", {"foo": "bar"})
    assert await store.get("123") == {"foo": "bar"}
    assert await async_redis.ttl("sess:123") >= 86399

    expires = expires_in(60)
    await store.set("456", {"cookie": {"expires": expires}})
    ttl = await async_redis.ttl("sess:456")
    assert 0 < ttl <= 60

    result = await store.touch("456", {"cookie": {"expires": expires_in(90)}})
    assert result is TouchResult.OK
    assert await async_redis.ttl("sess:456") > 60

    assert await store.length() == 2
    assert sorted(await store.ids()) == ["123", "456"]

    sessions = sorted(await store.all(), key=lambda s: s["id"])
    assert sessions == [
        {"id": "123", "foo": "bar"},
        {"id": "456", "cookie": {"expires": expires}},
    ]

    await store.destroy("456")
    assert await store.length() == 1
    assert await store.get("456") is None

    assert await store.clear() == 1
    assert await store.length() == 0


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_async_driver(self, async_redis) -> None:
        store = RedisStore(async_redis)
        assert isinstance(store.client, AsyncRedisClient)
        await _lifecycle(store, async_redis)

    @pytest.mark.asyncio
    async def test_sync_driver(self, sync_redis, async_redis) -> None:
        store = RedisStore(sync_redis)
        assert isinstance(store.client, SyncRedisClient)
        await _lifecycle(store, async_redis)

    @pytest.mark.asyncio
    async def test_undecoded_driver(self, fake_server, async_redis) -> None:
        import fakeredis.aioredis

        raw = fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=False)
        try:
            await _lifecycle(RedisStore(raw), async_redis)
        finally:
            await raw.aclose()


class TestBulkEnumeration:
    @pytest.mark.asyncio
    async def test_many_sessions_span_several_scan_pages(self, async_redis) -> None:
        store = RedisStore(async_redis, scan_count=100)
        cookie = {"expires": expires_in(60)}
        for n in range(1000):
            await store.set(f"s{n}", {"cookie": cookie})

        assert await store.length() == 1000
        ids = await store.ids()
        assert len(set(ids)) == 1000
        assert "s999" in ids

        assert await store.clear() == 1000
        assert await store.length() == 0

    @pytest.mark.asyncio
    async def test_other_prefixes_are_untouched(self, async_redis) -> None:
        await async_redis.set("cache:1", "keep")
        store = RedisStore(async_redis, prefix="app:")
        await store.set("a", {"x": 1})

        assert await store.ids() == ["a"]
        assert await store.clear() == 1
        assert await async_redis.get("cache:1") == "keep"

    @pytest.mark.asyncio
    async def test_all_skips_keys_expired_after_scan(self, async_redis) -> None:
        store = RedisStore(async_redis)
        await store.set("a", {"x": 1})
        await async_redis.set("sess:b", "")
        assert await store.all() == [{"x": 1, "id": "a"}]


class TestExpiry:
    @pytest.mark.asyncio
    async def test_past_expiry_removes_existing_session(self, async_redis) -> None:
        store = RedisStore(async_redis)
        await store.set("789", {"cookie": {"expires": expires_in(90)}})
        assert await store.length() == 1

        await store.set("789", {"cookie": {"expires": expires_in(-90)}})
        assert await store.length() == 0
        assert await store.get("789") is None

    @pytest.mark.asyncio
    async def test_ttl_function(self, async_redis) -> None:
        store = RedisStore(async_redis, ttl=lambda session: session["keep"])
        await store.set("a", {"keep": 120})
        assert 100 < await async_redis.ttl("sess:a") <= 120

    @pytest.mark.asyncio
    async def test_fixed_ttl(self, async_redis) -> None:
        store = RedisStore(async_redis, ttl=30)
        await store.set("a", {"x": 1})
        assert 0 < await async_redis.ttl("sess:a") <= 30

    @pytest.mark.asyncio
    async def test_disable_ttl(self, async_redis) -> None:
        store = RedisStore(async_redis, disable_ttl=True)
        await store.set("a", {"cookie": {"expires": expires_in(60)}})
        assert await async_redis.ttl("sess:a") == -1

        assert await store.touch("a", {"cookie": {"expires": expires_in(90)}}) is TouchResult.OK
        assert await async_redis.ttl("sess:a") == -1

    @pytest.mark.asyncio
    async def test_disable_touch(self, async_redis) -> None:
        store = RedisStore(async_redis, disable_touch=True)
        await store.set("a", {"cookie": {"expires": expires_in(60)}})
        await store.touch("a", {"cookie": {"expires": expires_in(900)}})
        assert await async_redis.ttl("sess:a") <= 60

    @pytest.mark.asyncio
    async def test_touch_missing_session(self, async_redis) -> None:
        store = RedisStore(async_redis)
        assert await store.touch("gone", {}) is TouchResult.EXPIRED
        assert await async_redis.exists("sess:gone") == 0

    @pytest.mark.asyncio
    async def test_touch_does_not_rewrite_value(self, async_redis) -> None:
        store = RedisStore(async_redis)
        await store.set("a", {"v": 1})
        await store.touch("a", {"v": 2})
        assert await store.get("a") == {"v": 1}


class TestErrors:
    @pytest.mark.asyncio
    async def test_invalid_ttl_type(self, async_redis) -> None:
        store = RedisStore(async_redis, ttl="tomorrow")
        with pytest.raises(ConfigurationError):
            await store.set("a", {"x": 1})
        with pytest.raises(ConfigurationError):
            await store.touch("a", {"x": 1})
        assert await async_redis.exists("sess:a") == 0

    @pytest.mark.asyncio
    async def test_unserializable_session(self, async_redis) -> None:
        store = RedisStore(async_redis)
        with pytest.raises(SerializationError):
            await store.set("a", {"when": object()})
        assert await async_redis.exists("sess:a") == 0

    @pytest.mark.asyncio
    async def test_corrupt_payload(self, async_redis) -> None:
        await async_redis.set("sess:a", "{not json")
        with pytest.raises(SerializationError):
            await RedisStore(async_redis).get("a")

    @pytest.mark.asyncio
    async def test_non_utf8_payload(self, fake_server) -> None:
        import fakeredis.aioredis

        raw = fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=False)
        try:
            await raw.set("sess:bad", b"\xff\xfe")
            store = RedisStore(raw)
            with pytest.raises(SerializationError, match="not UTF-8"):
                await store.get("bad")
            with pytest.raises(SerializationError, match="not UTF-8"):
                await store.all()
        finally:
            await raw.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ttl", [0, -5, 0.5])
    async def test_fixed_ttl_below_one_second(self, async_redis, ttl: float) -> None:
        store = RedisStore(async_redis, ttl=ttl)
        with pytest.raises(ConfigurationError, match="at least 1 second"):
            await store.set("a", {"x": 1})
        assert await async_redis.exists("sess:a") == 0


class TestSerializers:
    @pytest.mark.asyncio
    async def test_yaml_serializer(self, async_redis) -> None:
        store = RedisStore(async_redis, serializer=YAMLSerializer())
        session = {"cart": {"items": ["a", "b"]}, "user": "u1"}
        await store.set("a", session)
        assert await store.get("a") == session
        assert "user: u1" in await async_redis.get("sess:a")

    @pytest.mark.asyncio
    async def test_custom_serializer(self, async_redis) -> None:
        class Reversed:
            def stringify(self, session: dict) -> str:
                return repr(sorted(session.items()))[::-1]

            def parse(self, raw: str) -> dict:
                import ast

                return dict(ast.literal_eval(raw[::-1]))

        store = RedisStore(async_redis, serializer=Reversed())
        await store.set("a", {"k": "v"})
        assert await store.get("a") == {"k": "v"}
