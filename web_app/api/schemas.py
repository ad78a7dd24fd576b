"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from shortener.database.models import ShortURL


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateURLRequest(CamelModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten")
    custom_code: Optional[str] = Field(None, description="Optional custom short code (4-20 alphanumeric characters)")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"url": "https://example.com/very/long/path/to/resource"},
                {"url": "https://github.com/user/repo", "customCode": "myrepo"},
            ]
        },
    )


class UpdateURLRequest(CamelModel):
    """Request to point a short code at a new URL."""

    url: str = Field(..., description="The replacement URL")


class ShortURLResponse(CamelModel):
    """A short URL record."""

    id: Optional[str] = None
    url: str
    short_code: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: ShortURL, **extra) -> "ShortURLResponse":
        return cls(
            id=record.id,
            url=record.url,
            short_code=record.short_code,
            created_at=record.created,
            updated_at=record.updated,
            **extra,
        )


class CreateURLResponse(ShortURLResponse):
    """Response after shortening a URL."""

    short_url: str = Field(..., description="The complete short URL")


class GetURLResponse(ShortURLResponse):
    """Response when resolving a short code."""

    access_count: int


class StatsResponse(ShortURLResponse):
    """Access statistics for a short code."""

    access_count: int


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    message: Optional[str] = Field(None, description="Detailed error information")
    code: int = Field(..., description="HTTP status code")
