"""Tests for service layer."""

import asyncio
import re

import pytest

from shortener.database.memory import MemoryURLStore
from shortener.database.models import ShortURL
from shortener.errors import ErrorKind, ServiceError
from shortener.service import URLShortenerService
from shortener.settings import ShortenerSettings
from fakes import CountingStore, FailingStore


class TestURLShortenerService:
    """Test URL shortener service."""

    @pytest.mark.asyncio
    async def test_create_short_url(self, service, sample_urls):
        """Test creating short URL."""
        record = await service.create_short_url(sample_urls[0])

        assert re.fullmatch(r"[0-9a-zA-Z]{6}", record.short_code)
        assert record.url == sample_urls[0]
        assert record.access_count == 0
        assert record.id
        assert record.created is not None

    @pytest.mark.asyncio
    async def test_access_count_increments(self, service):
        """Reads raise the access count to 1 then 2."""
        record = await service.create_short_url("https://example.com/a")

        first = await service.get_original_url(record.short_code)
        second = await service.get_original_url(record.short_code)

        assert first.url == "https://example.com/a"
        assert first.access_count == 1
        assert second.access_count == 2

    @pytest.mark.asyncio
    async def test_create_with_custom_code(self, service, store):
        """Custom code round trips through the store."""
        await service.create_short_url("https://example.com/a", custom_code="test1")

        stored = await store.get_by_code("test1")

        assert stored.url == "https://example.com/a"
        assert stored.short_code == "test1"

    @pytest.mark.asyncio
    async def test_create_duplicate_custom_code(self, service, sample_urls):
        """Test duplicate custom code rejection."""
        await service.create_short_url(sample_urls[0], custom_code="duplicate")

        with pytest.raises(ServiceError) as exc_info:
            await service.create_short_url(sample_urls[1], custom_code="duplicate")

        assert exc_info.value.kind is ErrorKind.DUPLICATE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["not-a-url", "ftp://example.com", "http://malware.com/x"])
    async def test_create_invalid_url(self, url):
        store = CountingStore()
        service = URLShortenerService(store=store)

        with pytest.raises(ServiceError) as exc_info:
            await service.create_short_url(url)

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert store.exists_calls == []
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_create_invalid_custom_code(self, service):
        with pytest.raises(ServiceError) as exc_info:
            await service.create_short_url("https://example.com", custom_code="abc-123")

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.message == "non-alphanumeric character"

    @pytest.mark.asyncio
    async def test_get_nonexistent_url(self, service):
        with pytest.raises(ServiceError) as exc_info:
            await service.get_original_url("nonexistent")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_statistics_do_not_count(self, service):
        record = await service.create_short_url("https://example.com/a")
        await service.get_original_url(record.short_code)

        stats = await service.get_statistics(record.short_code)
        stats_again = await service.get_statistics(record.short_code)

        assert stats.access_count == 1
        assert stats_again.access_count == 1

    @pytest.mark.asyncio
    async def test_update_short_url(self, service):
        record = await service.create_short_url("https://example.com/a", custom_code="upd8")

        updated = await service.update_short_url("upd8", "https://example.com/b")
        resolved = await service.get_original_url(record.short_code)

        assert updated.url == "https://example.com/b"
        assert resolved.url == "https://example.com/b"

    @pytest.mark.asyncio
    async def test_update_rejects_invalid_url(self, service):
        await service.create_short_url("https://example.com/a", custom_code="upd8")

        with pytest.raises(ServiceError) as exc_info:
            await service.update_short_url("upd8", "ftp://example.com")

        assert exc_info.value.kind is ErrorKind.VALIDATION

    @pytest.mark.asyncio
    async def test_update_nonexistent(self, service):
        with pytest.raises(ServiceError) as exc_info:
            await service.update_short_url("missing", "https://example.com")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_short_url(self, service):
        await service.create_short_url("https://example.com/a", custom_code="gone")

        await service.delete_short_url("gone")

        with pytest.raises(ServiceError) as exc_info:
            await service.get_statistics("gone")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_nonexistent(self, service):
        with pytest.raises(ServiceError) as exc_info:
            await service.delete_short_url("missing")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_health_check(self, service):
        health = await service.health_check()

        assert health == {"store": True, "overall": True}


class TestServiceFailures:
    """Store failures surface as INTERNAL errors."""

    @pytest.mark.asyncio
    async def test_store_failure_on_create(self):
        service = URLShortenerService(store=FailingStore())

        with pytest.raises(ServiceError) as exc_info:
            await service.create_short_url("https://example.com")

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.public_message == ServiceError.INTERNAL_PUBLIC_MESSAGE

    @pytest.mark.asyncio
    async def test_unhealthy_store(self):
        service = URLShortenerService(store=FailingStore())

        health = await service.health_check()

        assert health["overall"] is False

    @pytest.mark.asyncio
    async def test_increment_failure_is_internal(self):
        class NoIncrementStore(MemoryURLStore):
            async def increment_access_count(self, short_code):
                raise ServiceError.internal("fake.increment", "write failed")

        broken = NoIncrementStore()
        service = URLShortenerService(store=broken)
        record = await service.create_short_url("https://example.com/a")

        with pytest.raises(ServiceError) as exc_info:
            await service.get_original_url(record.short_code)

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.message == "failed to increment access count"

    @pytest.mark.asyncio
    async def test_slow_store_times_out(self):
        class SlowStore(CountingStore):
            async def get_by_code(self, short_code):
                await asyncio.sleep(1)

        service = URLShortenerService(store=SlowStore(), settings=ShortenerSettings(request_timeout=0.01))

        with pytest.raises(ServiceError) as exc_info:
            await service.get_statistics("abcdef")

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert "timed out" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_lost_create_race_is_duplicate(self):
        """The store's unique constraint rejects a code taken after the check."""

        class RacingStore(CountingStore):
            async def exists_by_code(self, short_code):
                exists = await super().exists_by_code(short_code)
                # Another writer claims the code between check and create
                await super().create(ShortURL(url="https://other.example.com", short_code=short_code))
                return exists

        service = URLShortenerService(store=RacingStore())

        with pytest.raises(ServiceError) as exc_info:
            await service.create_short_url("https://example.com", custom_code="race1")

        assert exc_info.value.kind is ErrorKind.DUPLICATE
