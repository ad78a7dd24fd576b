"""Tests for short code uniqueness resolution."""

import asyncio
import re

import pytest
from unittest.mock import MagicMock

from shortener.errors import ErrorKind, ServiceError
from shortener.resolver import ShortCodeResolver
from shortener.settings import ShortenerSettings
from shortener.shortcode import ShortCodeGenerator, RandomSourceError
from fakes import CountingStore, FailingStore, FixedGenerator


class TestCustomCode:
    """Custom codes are validated and checked for existence once."""

    @pytest.mark.asyncio
    async def test_free_custom_code(self):
        store = CountingStore()
        resolver = ShortCodeResolver(store)

        code = await resolver.resolve_code("golang")

        assert code == "golang"
        assert store.exists_calls == ["golang"]
        assert store.create_calls == []

    @pytest.mark.asyncio
    async def test_taken_custom_code(self):
        store = CountingStore(taken={"golang"})
        resolver = ShortCodeResolver(store)

        with pytest.raises(ServiceError) as exc_info:
            await resolver.resolve_code("golang")

        assert exc_info.value.kind is ErrorKind.DUPLICATE
        assert store.exists_calls == ["golang"]
        assert store.create_calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["ab", "abc-123", "a" * 21, ""])
    async def test_malformed_custom_code_skips_store(self, code):
        store = CountingStore()
        resolver = ShortCodeResolver(store)

        with pytest.raises(ServiceError) as exc_info:
            await resolver.resolve_code(code)

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert store.exists_calls == []

    @pytest.mark.asyncio
    async def test_existence_check_failure_is_internal(self):
        resolver = ShortCodeResolver(FailingStore())

        with pytest.raises(ServiceError) as exc_info:
            await resolver.resolve_code("golang")

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.message == "failed to check code existence"
        assert isinstance(exc_info.value.cause, ServiceError)


class TestGeneratedCode:
    """Generated codes are retried on collision up to max_retries."""

    @pytest.mark.asyncio
    async def test_first_attempt_free(self):
        store = CountingStore()
        resolver = ShortCodeResolver(store)

        code = await resolver.resolve_code()

        assert re.fullmatch(r"[0-9a-zA-Z]{6}", code)
        assert store.exists_calls == [code]

    @pytest.mark.asyncio
    async def test_retries_after_collision(self):
        store = CountingStore(taken={"aaaaaa", "bbbbbb"})
        generator = FixedGenerator(["aaaaaa", "bbbbbb", "cccccc"])
        resolver = ShortCodeResolver(store, generator=generator)

        code = await resolver.resolve_code(None)

        assert code == "cccccc"
        assert store.exists_calls == ["aaaaaa", "bbbbbb", "cccccc"]

    @pytest.mark.asyncio
    async def test_exhaustion_after_five_attempts(self):
        store = CountingStore(always_exists=True)
        resolver = ShortCodeResolver(store)

        with pytest.raises(ServiceError) as exc_info:
            await resolver.resolve_code(None)

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.message == "failed to generate unique code after 5 attempts"
        assert len(store.exists_calls) == 5
        assert store.create_calls == []

    @pytest.mark.asyncio
    async def test_max_retries_from_settings(self):
        store = CountingStore(always_exists=True)
        resolver = ShortCodeResolver(store, settings=ShortenerSettings(max_retries=2))

        with pytest.raises(ServiceError):
            await resolver.resolve_code()

        assert len(store.exists_calls) == 2

    @pytest.mark.asyncio
    async def test_code_length_from_settings(self):
        store = CountingStore()
        resolver = ShortCodeResolver(store, settings=ShortenerSettings(short_code_length=9))

        code = await resolver.resolve_code()

        assert len(code) == 9

    @pytest.mark.asyncio
    async def test_random_source_failure_is_internal(self):
        generator = MagicMock(spec=ShortCodeGenerator)
        generator.generate.side_effect = RandomSourceError("no entropy")
        store = CountingStore()
        resolver = ShortCodeResolver(store, generator=generator)

        with pytest.raises(ServiceError) as exc_info:
            await resolver.resolve_code()

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert isinstance(exc_info.value.cause, RandomSourceError)
        assert store.exists_calls == []

    @pytest.mark.asyncio
    async def test_existence_check_failure_aborts(self):
        resolver = ShortCodeResolver(FailingStore())

        with pytest.raises(ServiceError) as exc_info:
            await resolver.resolve_code()

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.message == "failed to check code existence"


class SlowStore(CountingStore):
    async def exists_by_code(self, short_code: str) -> bool:
        await asyncio.sleep(1)
        return False


class TestDeadline:
    """Existence checks are bounded by the request timeout."""

    @pytest.mark.asyncio
    async def test_slow_existence_check_times_out(self):
        resolver = ShortCodeResolver(SlowStore(), settings=ShortenerSettings(request_timeout=0.01))

        with pytest.raises(ServiceError) as exc_info:
            await resolver.resolve_code("golang")

        assert exc_info.value.kind is ErrorKind.INTERNAL
        assert exc_info.value.message == "failed to check code existence"
        assert "timed out" in exc_info.value.cause.message
