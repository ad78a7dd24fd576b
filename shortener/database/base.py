"""Abstract base class for URL shortener store implementations."""

from abc import ABC, abstractmethod

from ..errors import ServiceError, ErrorKind
from .models import ShortURL


class URLStoreBase(ABC):
    """Abstract base class for short URL persistence.

    Every method reports failures as ServiceError: NOT_FOUND when the code
    does not exist, DUPLICATE when create hits the unique constraint on
    short_code, INTERNAL for anything else (transport, decoding, ...).
    """

    @abstractmethod
    async def create(self, record: ShortURL) -> ShortURL:
        """Persist a new short URL.

        The store must enforce uniqueness of short_code; a conflicting
        write raises a DUPLICATE error.

        Args:
            record: The record to create (id and timestamps are ignored)

        Returns:
            The persisted record with store-assigned id and timestamps
        """

    @abstractmethod
    async def get_by_code(self, short_code: str) -> ShortURL:
        """Get the record for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The stored record
        """

    async def exists_by_code(self, short_code: str) -> bool:
        """Check if a short code already exists.

        Implemented atop get_by_code: NOT_FOUND means False, any other
        failure propagates.

        Args:
            short_code: The short code to check

        Returns:
            True if exists, False otherwise
        """
        try:
            await self.get_by_code(short_code)
        except ServiceError as e:
            if e.kind is ErrorKind.NOT_FOUND:
                return False
            raise
        return True

    @abstractmethod
    async def update(self, short_code: str, new_url: str) -> ShortURL:
        """Point an existing short code at a new URL.

        Args:
            short_code: The short code to update
            new_url: The replacement URL

        Returns:
            The updated record
        """

    @abstractmethod
    async def delete(self, short_code: str) -> None:
        """Delete a short URL.

        Args:
            short_code: The short code to delete
        """

    @abstractmethod
    async def increment_access_count(self, short_code: str) -> None:
        """Increment the access count for a short code.

        Args:
            short_code: The short code to update
        """

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        return True

    async def close(self) -> None:
        """Release connections held by the store."""
