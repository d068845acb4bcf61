#!/usr/bin/env python3
"""Example: Quickstart

Stores, touches, enumerates and clears sessions in a local Redis, then
shows the soft-delete mode refusing to resurrect a destroyed session.

Usage:
    python examples/01_quickstart.py [redis://localhost:6379/0]

Requirements:
    pip install redis-session-store
"""
from __future__ import annotations

import asyncio
import sys
from datetime import datetime, timedelta, timezone

import redis_session_store
from redis_session_store import RedisStore


def cookie_expiring_in(seconds: int) -> dict[str, str]:
    return {"expires": (datetime.now(timezone.utc) + timedelta(seconds=seconds)).isoformat()}


async def main(url: str) -> None:
    print(f"redis-session-store v{redis_session_store.__version__}")

    store = RedisStore.from_url(url, prefix="example:")
    try:
        await store.set("123", {"foo": "bar"})
        await store.set("456", {"cookie": cookie_expiring_in(60)})
        print("get 123:", await store.get("123"))
        print("touch 456:", (await store.touch("456", {"cookie": cookie_expiring_in(90)})).value)
        print("length:", await store.length())
        print("ids:", await store.ids())
        print("all:", await store.all())
        print("cleared:", await store.clear())
    finally:
        await store.close()

    soft = RedisStore.from_url(url, prefix="example:", tombstones=True)
    try:
        await soft.set("789", {"cart": ["book"]})
        await soft.destroy("789")
        await soft.set("789", {"cart": ["book", "pen"]})  # late writer
        print("after late write:", await soft.get("789"))
        print("length including tombstones:", await soft.length(include_tombstones=True))
        await soft.clear()
    finally:
        await soft.close()


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "redis://localhost:6379/0"))
