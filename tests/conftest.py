"""Shared fixtures: fakeredis clients bound to one in-memory server per test."""
from __future__ import annotations

import fakeredis
import fakeredis.aioredis
import pytest
import pytest_asyncio


class FakeClock:
    """Settable epoch-seconds clock."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def fake_server() -> fakeredis.FakeServer:
    return fakeredis.FakeServer()


@pytest_asyncio.fixture()
async def async_redis(fake_server: fakeredis.FakeServer):
    client = fakeredis.aioredis.FakeRedis(server=fake_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture()
def sync_redis(fake_server: fakeredis.FakeServer):
    client = fakeredis.FakeRedis(server=fake_server, decode_responses=True)
    yield client
    client.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
