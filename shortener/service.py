"""Business logic service for URL shortener."""

import logging
from dataclasses import replace
from typing import Optional, Dict

from .errors import ServiceError
from .settings import ShortenerSettings
from .shortcode import ShortCodeGenerator
from .resolver import ShortCodeResolver
from .common.deadline import with_deadline
from .common.validators import URLValidator
from .database.base import URLStoreBase
from .database.models import ShortURL


class URLShortenerService:
    """Service layer for URL shortening business logic.

    Every operation either returns its value or raises ServiceError; store
    calls are bounded by settings.request_timeout.
    """

    def __init__(
        self,
        store: URLStoreBase,
        settings: Optional[ShortenerSettings] = None,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        validator: Optional[URLValidator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize URL shortener service.

        Args:
            store: Store instance
            settings: Shortener settings (defaults if not specified)
            short_code_generator: Optional short code generator
            validator: Optional validator
            logger: Optional logger
        """
        self.store = store
        self.settings = settings or ShortenerSettings()
        self.generator = short_code_generator or ShortCodeGenerator(default_length=self.settings.short_code_length)
        self.validator = validator or URLValidator(self.settings)
        self.logger = logger or logging.getLogger(__name__)
        self.resolver = ShortCodeResolver(
            store=store,
            settings=self.settings,
            generator=self.generator,
            validator=self.validator,
            logger=self.logger,
        )

    async def _call(self, awaitable, op: str):
        return await with_deadline(awaitable, self.settings.request_timeout, op)

    async def create_short_url(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
    ) -> ShortURL:
        """Create a new short URL.

        Args:
            original_url: The original long URL
            custom_code: Optional custom short code

        Returns:
            The persisted record

        Raises:
            ServiceError: VALIDATION, DUPLICATE or INTERNAL
        """
        op = "service.create_short_url"
        self.validator.validate_url(original_url).raise_for_failure(op)

        short_code = await self.resolver.resolve_code(custom_code)

        record = ShortURL(url=original_url, short_code=short_code, access_count=0)
        created = await self._call(self.store.create(record), op)

        self.logger.info(f"Created short URL: {created.short_code} -> {created.url}")
        return created

    async def get_original_url(self, short_code: str) -> ShortURL:
        """Resolve a short code and count the access.

        Args:
            short_code: The short code to lookup

        Returns:
            The record, with access_count including this access

        Raises:
            ServiceError: NOT_FOUND or INTERNAL
        """
        op = "service.get_original_url"
        record = await self._call(self.store.get_by_code(short_code), op)

        try:
            await self._call(self.store.increment_access_count(short_code), op)
        except ServiceError as e:
            raise ServiceError.internal(op, "failed to increment access count", e) from e

        self.logger.debug(f"Retrieved URL: {short_code} -> {record.url}")
        return replace(record, access_count=record.access_count + 1)

    async def update_short_url(self, short_code: str, new_url: str) -> ShortURL:
        """Point a short code at a new URL.

        Args:
            short_code: The short code to update
            new_url: The replacement URL

        Returns:
            The updated record
        """
        op = "service.update_short_url"
        self.validator.validate_url(new_url).raise_for_failure(op)

        updated = await self._call(self.store.update(short_code, new_url), op)

        self.logger.info(f"Updated short URL: {short_code} -> {new_url}")
        return updated

    async def delete_short_url(self, short_code: str) -> None:
        """Delete a short URL.

        Args:
            short_code: The short code to delete
        """
        await self._call(self.store.delete(short_code), "service.delete_short_url")
        self.logger.info(f"Deleted short URL: {short_code}")

    async def get_statistics(self, short_code: str) -> ShortURL:
        """Get a short URL with its access count, without counting an access.

        Args:
            short_code: The short code to lookup

        Returns:
            The stored record
        """
        return await self._call(self.store.get_by_code(short_code), "service.get_statistics")

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        try:
            store_healthy = await self._call(self.store.health_check(), "service.health_check")
        except ServiceError as e:
            self.logger.error(f"Store health check failed: {e}")
            store_healthy = False

        return {
            "store": store_healthy,
            "overall": store_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.store.close()
