"""In-memory store for URL shortener (tests and local development)."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional

from ..errors import ServiceError
from .base import URLStoreBase
from .models import ShortURL


class MemoryURLStore(URLStoreBase):
    """Keeps records in a dict keyed by short code.

    All operations complete without awaiting, so each one is atomic with
    respect to other tasks on the same event loop.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._records: Dict[str, ShortURL] = {}

    def __len__(self) -> int:
        return len(self._records)

    async def create(self, record: ShortURL) -> ShortURL:
        if record.short_code in self._records:
            raise ServiceError.duplicate("memory.create", "short code already exists")

        now = datetime.now(timezone.utc)
        stored = ShortURL(
            url=record.url,
            short_code=record.short_code,
            access_count=record.access_count,
            id=uuid.uuid4().hex[:15],
            created=now,
            updated=now,
        )
        self._records[stored.short_code] = stored
        self.logger.debug(f"Created short URL in memory: {stored.short_code}")
        return replace(stored)

    async def get_by_code(self, short_code: str) -> ShortURL:
        stored = self._records.get(short_code)
        if stored is None:
            raise ServiceError.not_found("memory.get_by_code", "short URL not found")
        return replace(stored)

    async def update(self, short_code: str, new_url: str) -> ShortURL:
        stored = self._records.get(short_code)
        if stored is None:
            raise ServiceError.not_found("memory.update", "short URL not found")

        stored.url = new_url
        stored.updated = datetime.now(timezone.utc)
        return replace(stored)

    async def delete(self, short_code: str) -> None:
        if self._records.pop(short_code, None) is None:
            raise ServiceError.not_found("memory.delete", "short URL not found")

    async def increment_access_count(self, short_code: str) -> None:
        stored = self._records.get(short_code)
        if stored is None:
            raise ServiceError.not_found("memory.increment_access_count", "short URL not found")
        stored.access_count += 1
