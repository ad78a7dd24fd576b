"""Data models for URL shortener."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def _parse_datetime(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class ShortURL:
    """A short code mapped to its original URL."""

    url: str
    short_code: str
    access_count: int = 0
    id: Optional[str] = None
    created: Optional[datetime] = None
    updated: Optional[datetime] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "url": self.url,
            "short_code": self.short_code,
            "access_count": self.access_count,
            "created": self.created.isoformat() if self.created else None,
            "updated": self.updated.isoformat() if self.updated else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ShortURL":
        """Create from dictionary."""
        return cls(
            url=data["url"],
            short_code=data["short_code"],
            access_count=int(data.get("access_count") or 0),
            id=data.get("id"),
            created=_parse_datetime(data.get("created")),
            updated=_parse_datetime(data.get("updated")),
        )
