"""Shared fixtures: an in-memory async Redis double with hash commands and pub/sub fan-out."""
from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Any, Dict, List, Optional

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from redis_config_store.services.config_store import change_publisher
from redis_config_store.services.config_store import redis_config_store as store_module


class FakeRedisServer:
    def __init__(self) -> None:
        self.hashes: Dict[str, Dict[str, Any]] = {}
        self.subscribers: Dict[str, List["FakePubSub"]] = defaultdict(list)


class FakePubSub:
    def __init__(self, server: FakeRedisServer) -> None:
        self.server = server
        self.channels: List[str] = []
        self.queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    async def subscribe(self, *channels: str) -> None:
        for channel in channels:
            self.channels.append(channel)
            self.server.subscribers[channel].append(self)
            self.queue.put_nowait({"type": "subscribe", "pattern": None, "channel": channel, "data": len(self.channels)})

    async def unsubscribe(self, *channels: str) -> None:
        for channel in channels:
            if channel in self.channels:
                self.channels.remove(channel)
                self.server.subscribers[channel].remove(self)

    async def listen(self):
        while True:
            yield await self.queue.get()

    async def aclose(self) -> None:
        self.closed = True


class FakeRedis:
    def __init__(self, server: Optional[FakeRedisServer] = None) -> None:
        self.server = server or FakeRedisServer()
        self.calls: List[str] = []
        self.fail = False
        self.closed = False

    def _record(self, command: str) -> None:
        self.calls.append(command)
        if self.fail:
            raise RedisConnectionError("Connection refused")

    async def hgetall(self, key: str) -> Dict[str, Any]:
        self._record("hgetall")
        return dict(self.server.hashes.get(key, {}))

    async def hset(self, key: str, field: str, value: str) -> int:
        self._record("hset")
        fields = self.server.hashes.setdefault(key, {})
        created = 0 if field in fields else 1
        fields[field] = value
        return created

    async def hdel(self, key: str, *names: str) -> int:
        self._record("hdel")
        fields = self.server.hashes.get(key, {})
        deleted = 0
        for name in names:
            if name in fields:
                del fields[name]
                deleted += 1
        return deleted

    async def publish(self, channel: str, message: str) -> int:
        self._record("publish")
        receivers = list(self.server.subscribers.get(channel, []))
        for pubsub in receivers:
            pubsub.queue.put_nowait({"type": "message", "pattern": None, "channel": channel, "data": message})
        return len(receivers)

    def pubsub(self) -> FakePubSub:
        return FakePubSub(self.server)

    def duplicate(self) -> "FakeRedis":
        return FakeRedis(self.server)

    async def aclose(self) -> None:
        self.closed = True


class RecordingSubscriber:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.refresh_count = 0
        self.error = error

    def refresh(self) -> None:
        self.refresh_count += 1
        if self.error:
            raise self.error


async def settle() -> None:
    """Let listener tasks drain their queues."""
    await asyncio.sleep(0.01)


@pytest.fixture
def fake_redis(monkeypatch) -> FakeRedis:
    def _duplicate(client):
        return client.duplicate()

    monkeypatch.setattr(change_publisher, "duplicate_client", _duplicate)
    monkeypatch.setattr(store_module, "duplicate_client", _duplicate)
    return FakeRedis()


@pytest.fixture
def configuration_name() -> str:
    return "my-config-key"
