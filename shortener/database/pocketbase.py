"""PocketBase implementation for URL shortener.

PocketBase runs as a separate service; records live in a collection with
fields url (text), short_code (text, unique index) and access_count (number).
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any

import httpx

from ..errors import ServiceError
from .base import URLStoreBase
from .models import ShortURL


DEFAULT_COLLECTION = "short_urls"


def parse_pocketbase_time(value: Optional[str], logger: Optional[logging.Logger] = None) -> Optional[datetime]:
    """Parse a PocketBase timestamp ("2024-01-01 12:00:00.123Z").

    Args:
        value: Timestamp string from a record
        logger: Optional logger for unparsable values

    Returns:
        Timezone-aware datetime, or None if empty or unparsable
    """
    if not value:
        return None

    iso = value.replace(" ", "T", 1)
    if iso.endswith("Z"):
        iso = iso[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        (logger or logging.getLogger(__name__)).warning(f"Failed to parse PocketBase timestamp: {value!r}")
        return None


def build_code_filter(short_code: str) -> str:
    """Build a PocketBase filter expression matching one short code."""
    escaped = short_code.replace("\\", "\\\\").replace('"', '\\"')
    return f'(short_code="{escaped}")'


class PocketBaseURLStore(URLStoreBase):
    """Store short URLs in a PocketBase collection over its REST API."""

    def __init__(
        self,
        base_url: str,
        collection: str = DEFAULT_COLLECTION,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize PocketBase store.

        Args:
            base_url: PocketBase server URL (e.g., http://localhost:8090)
            collection: Collection holding short URL records
            timeout_seconds: HTTP timeout per request
            client: Optional pre-built HTTP client (tests inject a mock transport)
            logger: Optional logger instance
        """
        self.base_url = base_url.rstrip("/")
        self.collection = collection
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout_seconds)

    @property
    def records_path(self) -> str:
        return f"/api/collections/{self.collection}/records"

    def _record_from_pocketbase(self, data: Dict[str, Any]) -> ShortURL:
        return ShortURL(
            id=data.get("id"),
            url=data.get("url", ""),
            short_code=data.get("short_code", ""),
            access_count=int(data.get("access_count") or 0),
            created=parse_pocketbase_time(data.get("created"), self.logger),
            updated=parse_pocketbase_time(data.get("updated"), self.logger),
        )

    @staticmethod
    def _is_unique_violation(response: httpx.Response) -> bool:
        """PocketBase reports unique index conflicts as 400 validation_not_unique."""
        if response.status_code != 400:
            return False
        try:
            field_error = response.json().get("data", {}).get("short_code", {})
        except ValueError:
            return False
        return isinstance(field_error, dict) and field_error.get("code") == "validation_not_unique"

    async def _send(self, op: str, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            self.logger.error(f"PocketBase request failed ({op}): {e}")
            raise ServiceError.internal(op, "request to record store failed", e) from e

    def _decode(self, op: str, response: httpx.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"Failed to decode PocketBase response ({op}): {e}")
            raise ServiceError.internal(op, "failed to decode response", e) from e

    async def create(self, record: ShortURL) -> ShortURL:
        op = "pocketbase.create"
        self.logger.debug(f"Creating new short URL: {record.short_code} -> {record.url}")

        response = await self._send(
            op,
            "POST",
            self.records_path,
            json={"url": record.url, "short_code": record.short_code, "access_count": 0},
        )

        if response.status_code == 409 or self._is_unique_violation(response):
            raise ServiceError.duplicate(op, "short code already exists")
        if response.status_code not in (200, 201):
            self.logger.error(f"PocketBase returned error status {response.status_code}")
            raise ServiceError.internal(op, "PocketBase error", RuntimeError(f"status {response.status_code}"))

        created = self._record_from_pocketbase(self._decode(op, response))
        self.logger.info(f"Short URL record created: {created.short_code} (id={created.id})")
        return created

    async def get_by_code(self, short_code: str) -> ShortURL:
        op = "pocketbase.get_by_code"
        self.logger.debug(f"Looking up short URL by code: {short_code}")

        response = await self._send(
            op,
            "GET",
            self.records_path,
            params={"filter": build_code_filter(short_code), "perPage": 1},
        )

        if response.status_code >= 500:
            self.logger.error(f"PocketBase lookup failed for {short_code}: status {response.status_code}")
            raise ServiceError.internal(op, "PocketBase error", RuntimeError(f"status {response.status_code}"))

        if response.status_code != 200:
            self.logger.debug(f"Short URL not found: {short_code} (status {response.status_code})")
            raise ServiceError.not_found(op, "short URL not found")

        items = self._decode(op, response).get("items") or []
        if not items:
            self.logger.debug(f"Short URL not found: {short_code}")
            raise ServiceError.not_found(op, "short URL not found")

        return self._record_from_pocketbase(items[0])

    async def _patch(self, op: str, record_id: str, body: Dict[str, Any]) -> httpx.Response:
        response = await self._send(op, "PATCH", f"{self.records_path}/{record_id}", json=body)
        if response.status_code != 200:
            raise ServiceError.internal(op, "PocketBase error", RuntimeError(f"status {response.status_code}"))
        return response

    async def update(self, short_code: str, new_url: str) -> ShortURL:
        op = "pocketbase.update"
        self.logger.debug(f"Updating short URL: {short_code} -> {new_url}")

        existing = await self.get_by_code(short_code)
        response = await self._patch(op, existing.id, {"url": new_url})

        updated = self._record_from_pocketbase(self._decode(op, response))
        self.logger.info(f"Short URL updated: {short_code} -> {new_url}")
        return updated

    async def delete(self, short_code: str) -> None:
        op = "pocketbase.delete"
        self.logger.debug(f"Deleting short URL: {short_code}")

        existing = await self.get_by_code(short_code)
        response = await self._send(op, "DELETE", f"{self.records_path}/{existing.id}")
        if response.status_code not in (200, 204):
            raise ServiceError.internal(op, "PocketBase error", RuntimeError(f"status {response.status_code}"))

        self.logger.info(f"Short URL deleted: {short_code}")

    async def increment_access_count(self, short_code: str) -> None:
        op = "pocketbase.increment_access_count"

        # Read-modify-write: concurrent reads of one code may lose increments
        existing = await self.get_by_code(short_code)
        new_count = existing.access_count + 1
        await self._patch(op, existing.id, {"access_count": new_count})

        self.logger.debug(f"Access count incremented: {short_code} -> {new_count}")

    async def health_check(self) -> bool:
        try:
            response = await self.client.get("/api/health")
        except httpx.HTTPError as e:
            self.logger.error(f"PocketBase health check failed: {e}")
            return False
        return response.status_code == 200

    async def close(self) -> None:
        await self.client.aclose()
