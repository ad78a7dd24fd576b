"""Tests for the Redis store against an in-process fake client."""

import json
from typing import Dict, List, Optional

import pytest
from unittest.mock import AsyncMock
from redis.exceptions import ConnectionError as RedisConnectionError

from shortener.database.models import ShortURL
from shortener.database.redis_store import RedisKeySchema, RedisURLStore
from shortener.errors import ErrorKind, ServiceError


class FakePipeline:
    """Buffers commands and runs them against the fake client on execute()."""

    def __init__(self, client: "FakeRedis"):
        self.client = client
        self.commands: List[tuple] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def get(self, key):
        self.commands.append(("get", key))
        return self

    async def execute(self):
        return [await getattr(self.client, name)(*args) for name, *args in self.commands]


class FakeRedis:
    """Subset of redis.asyncio.Redis with decode_responses=True semantics."""

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.closed = False

    async def incr(self, key):
        value = int(self.data.get(key, 0)) + 1
        self.data[key] = str(value)
        return value

    async def set(self, key, value, nx=False, xx=False):
        if nx and key in self.data:
            return None
        if xx and key not in self.data:
            return None
        self.data[key] = str(value)
        return True

    async def get(self, key) -> Optional[str]:
        return self.data.get(key)

    async def exists(self, *keys):
        return sum(1 for key in keys if key in self.data)

    async def delete(self, *keys):
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def ping(self):
        return True

    async def aclose(self):
        self.closed = True

    def pipeline(self, transaction=True):
        return FakePipeline(self)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def redis_store(fake_redis):
    return RedisURLStore(prefix="test", client=fake_redis)


class TestRedisKeySchema:
    """Test key naming."""

    def test_prefixed(self):
        keys = RedisKeySchema(prefix="shortener")

        assert keys.link_key("abc123") == "shortener:links:abc123"
        assert keys.hits_key("abc123") == "shortener:links:abc123:hits"
        assert keys.counter_key() == "shortener:links:counter"

    def test_no_prefix(self):
        assert RedisKeySchema(prefix=None).link_key("abc123") == "links:abc123"


class TestRedisURLStore:
    """Test Redis store operations."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, redis_store, fake_redis):
        created = await redis_store.create(ShortURL(url="https://example.com", short_code="abc123"))

        assert created.id == "1"
        assert created.access_count == 0
        assert fake_redis.data["test:links:abc123:hits"] == "0"
        assert "access_count" not in json.loads(fake_redis.data["test:links:abc123"])

        fetched = await redis_store.get_by_code("abc123")
        assert fetched.url == "https://example.com"
        assert fetched.created == created.created

    @pytest.mark.asyncio
    async def test_create_duplicate(self, redis_store):
        await redis_store.create(ShortURL(url="https://example.com", short_code="abc123"))

        with pytest.raises(ServiceError) as exc_info:
            await redis_store.create(ShortURL(url="https://other.com", short_code="abc123"))

        assert exc_info.value.kind is ErrorKind.DUPLICATE
        assert (await redis_store.get_by_code("abc123")).url == "https://example.com"

    @pytest.mark.asyncio
    async def test_get_missing(self, redis_store):
        with pytest.raises(ServiceError) as exc_info:
            await redis_store.get_by_code("missing")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_corrupt_record(self, redis_store, fake_redis):
        fake_redis.data["test:links:abc123"] = "{not json"

        with pytest.raises(ServiceError) as exc_info:
            await redis_store.get_by_code("abc123")

        assert exc_info.value.kind is ErrorKind.INTERNAL

    @pytest.mark.asyncio
    async def test_exists_by_code(self, redis_store):
        await redis_store.create(ShortURL(url="https://example.com", short_code="abc123"))

        assert await redis_store.exists_by_code("abc123") is True
        assert await redis_store.exists_by_code("missing") is False

    @pytest.mark.asyncio
    async def test_increment_access_count(self, redis_store):
        await redis_store.create(ShortURL(url="https://example.com", short_code="abc123"))

        await redis_store.increment_access_count("abc123")
        await redis_store.increment_access_count("abc123")

        assert (await redis_store.get_by_code("abc123")).access_count == 2

    @pytest.mark.asyncio
    async def test_increment_missing(self, redis_store, fake_redis):
        with pytest.raises(ServiceError) as exc_info:
            await redis_store.increment_access_count("missing")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert "test:links:missing:hits" not in fake_redis.data

    @pytest.mark.asyncio
    async def test_update_keeps_count(self, redis_store):
        await redis_store.create(ShortURL(url="https://example.com", short_code="abc123"))
        await redis_store.increment_access_count("abc123")

        updated = await redis_store.update("abc123", "https://example.com/new")
        fetched = await redis_store.get_by_code("abc123")

        assert updated.url == "https://example.com/new"
        assert fetched.url == "https://example.com/new"
        assert fetched.access_count == 1

    @pytest.mark.asyncio
    async def test_delete(self, redis_store, fake_redis):
        await redis_store.create(ShortURL(url="https://example.com", short_code="abc123"))

        await redis_store.delete("abc123")

        assert "test:links:abc123" not in fake_redis.data
        with pytest.raises(ServiceError) as exc_info:
            await redis_store.delete("abc123")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_redis_error_is_internal(self):
        client = AsyncMock()
        client.exists.side_effect = RedisConnectionError("connection refused")
        store = RedisURLStore(client=client)

        with pytest.raises(ServiceError) as exc_info:
            await store.exists_by_code("abc123")

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert isinstance(exc_info.value.cause, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_health_check(self, redis_store):
        assert await redis_store.health_check() is True

        client = AsyncMock()
        client.ping.side_effect = RedisConnectionError("connection refused")
        assert await RedisURLStore(client=client).health_check() is False

    @pytest.mark.asyncio
    async def test_close(self, redis_store, fake_redis):
        await redis_store.close()

        assert fake_redis.closed
