"""Redis implementation for URL shortener.

Key layout (prefix defaults to "shortener"):
    <prefix>:links:<short_code>        -> JSON record (id, url, short_code, created, updated)
    <prefix>:links:<short_code>:hits   -> access counter (INCR)
    <prefix>:links:counter             -> id sequence
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..errors import ServiceError
from .base import URLStoreBase
from .models import ShortURL


class RedisKeySchema:
    """Namespaced Redis key names for short URL records."""

    def __init__(self, prefix: Optional[str] = None):
        self.prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self.prefix}:{key}" if self.prefix else key

    def link_key(self, short_code: str) -> str:
        return self._key(f"links:{short_code}")

    def hits_key(self, short_code: str) -> str:
        return self._key(f"links:{short_code}:hits")

    def counter_key(self) -> str:
        return self._key("links:counter")


class RedisURLStore(URLStoreBase):
    """Store short URLs in Redis."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        prefix: Optional[str] = "shortener",
        timeout_seconds: float = 30.0,
        client: Optional[redis.Redis] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            prefix: Namespace prefix for all keys
            timeout_seconds: Socket timeout per command
            client: Optional pre-built client
            logger: Optional logger instance
        """
        self.redis_url = redis_url
        self.keys = RedisKeySchema(prefix=prefix)
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or redis.from_url(
            redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_timeout=timeout_seconds,
        )

    def _internal(self, op: str, e: Exception) -> ServiceError:
        self.logger.error(f"Redis error ({op}): {e}")
        return ServiceError.internal(op, "redis error", e)

    @staticmethod
    def _record_from_json(raw: str, hits) -> ShortURL:
        data = json.loads(raw)
        data["access_count"] = int(hits or 0)
        return ShortURL.from_dict(data)

    async def create(self, record: ShortURL) -> ShortURL:
        op = "redis.create"
        now = datetime.now(timezone.utc)
        try:
            record_id = await self.client.incr(self.keys.counter_key())
            stored = ShortURL(
                url=record.url,
                short_code=record.short_code,
                access_count=0,
                id=str(record_id),
                created=now,
                updated=now,
            )
            payload = stored.to_dict()
            payload.pop("access_count")

            # SET NX is the uniqueness constraint on short_code
            created = await self.client.set(self.keys.link_key(record.short_code), json.dumps(payload), nx=True)
            if not created:
                raise ServiceError.duplicate(op, "short code already exists")
            await self.client.set(self.keys.hits_key(record.short_code), 0)
        except RedisError as e:
            raise self._internal(op, e) from e

        self.logger.info(f"Created short URL: {record.short_code} -> {record.url}")
        return stored

    async def get_by_code(self, short_code: str) -> ShortURL:
        op = "redis.get_by_code"
        try:
            async with self.client.pipeline(transaction=True) as pipe:
                pipe.get(self.keys.link_key(short_code))
                pipe.get(self.keys.hits_key(short_code))
                raw, hits = await pipe.execute()
        except RedisError as e:
            raise self._internal(op, e) from e

        if raw is None:
            raise ServiceError.not_found(op, "short URL not found")

        try:
            return self._record_from_json(raw, hits)
        except (ValueError, KeyError) as e:
            raise ServiceError.internal(op, "failed to decode record", e) from e

    async def exists_by_code(self, short_code: str) -> bool:
        try:
            return bool(await self.client.exists(self.keys.link_key(short_code)))
        except RedisError as e:
            raise self._internal("redis.exists_by_code", e) from e

    async def update(self, short_code: str, new_url: str) -> ShortURL:
        op = "redis.update"
        existing = await self.get_by_code(short_code)
        existing.url = new_url
        existing.updated = datetime.now(timezone.utc)

        payload = existing.to_dict()
        payload.pop("access_count")
        try:
            # XX: only overwrite if the record still exists
            replaced = await self.client.set(self.keys.link_key(short_code), json.dumps(payload), xx=True)
        except RedisError as e:
            raise self._internal(op, e) from e
        if not replaced:
            raise ServiceError.not_found(op, "short URL not found")

        self.logger.info(f"Updated short URL: {short_code} -> {new_url}")
        return existing

    async def delete(self, short_code: str) -> None:
        op = "redis.delete"
        try:
            removed = await self.client.delete(self.keys.link_key(short_code), self.keys.hits_key(short_code))
        except RedisError as e:
            raise self._internal(op, e) from e
        if not removed:
            raise ServiceError.not_found(op, "short URL not found")

        self.logger.info(f"Deleted short URL: {short_code}")

    async def increment_access_count(self, short_code: str) -> None:
        op = "redis.increment_access_count"
        try:
            if not await self.client.exists(self.keys.link_key(short_code)):
                raise ServiceError.not_found(op, "short URL not found")
            hits = await self.client.incr(self.keys.hits_key(short_code))
        except RedisError as e:
            raise self._internal(op, e) from e

        self.logger.debug(f"Incremented access count for {short_code}: {hits}")

    async def health_check(self) -> bool:
        try:
            await self.client.ping()
            return True
        except RedisError as e:
            self.logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.aclose()
        self.logger.info("Redis connection closed")
