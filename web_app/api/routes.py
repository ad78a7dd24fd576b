"""API routes implementation."""

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from .schemas import (
    CreateURLRequest,
    CreateURLResponse,
    UpdateURLRequest,
    GetURLResponse,
    ShortURLResponse,
    StatsResponse,
    MessageResponse,
    HealthResponse,
    ErrorResponse,
)
from shortener.common.url_builder import build_public_short_url

router = APIRouter()
public_router = APIRouter()
redirect_router = APIRouter()

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Short code not found"}}
INTERNAL_RESPONSE = {500: {"model": ErrorResponse, "description": "Internal server error"}}


@router.post(
    "/shorten",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateURLResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        409: {"model": ErrorResponse, "description": "Short code already exists"},
        **INTERNAL_RESPONSE,
    },
    summary="Create short URL",
    description="Create a shortened URL. Optionally provide a custom short code.",
)
async def shorten_url(request: Request, body: CreateURLRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    config = request.app.state.config

    record = await service.create_short_url(
        original_url=body.url,
        custom_code=body.custom_code,
    )

    short_url = build_public_short_url(
        short_code=record.short_code,
        headers=request.headers,
        fallback_base_url=config.base_url,
        configured_prefix=config.path_prefix,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )

    return CreateURLResponse.from_record(record, short_url=short_url)


@router.get(
    "/shorten/{short_code}",
    response_model=GetURLResponse,
    responses={**NOT_FOUND_RESPONSE, **INTERNAL_RESPONSE},
    summary="Resolve short code",
    description="Get the original URL for a short code. Counts as an access.",
)
async def get_url(request: Request, short_code: str):
    """Resolve a short code and count the access."""
    record = await request.app.state.service.get_original_url(short_code)
    return GetURLResponse.from_record(record, access_count=record.access_count)


@router.put(
    "/shorten/{short_code}",
    response_model=ShortURLResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        **NOT_FOUND_RESPONSE,
        **INTERNAL_RESPONSE,
    },
    summary="Update short URL",
    description="Point an existing short code at a new URL.",
)
async def update_url(request: Request, short_code: str, body: UpdateURLRequest):
    """Update the URL behind a short code."""
    record = await request.app.state.service.update_short_url(short_code, body.url)
    return ShortURLResponse.from_record(record)


@router.delete(
    "/shorten/{short_code}",
    response_model=MessageResponse,
    responses={**NOT_FOUND_RESPONSE, **INTERNAL_RESPONSE},
    summary="Delete short URL",
)
async def delete_url(request: Request, short_code: str):
    """Delete a short URL."""
    await request.app.state.service.delete_short_url(short_code)
    return MessageResponse(message="Short URL deleted successfully")


@router.get(
    "/shorten/{short_code}/stats",
    response_model=StatsResponse,
    responses={**NOT_FOUND_RESPONSE, **INTERNAL_RESPONSE},
    summary="Get statistics",
    description="Get a short URL with its access count. Does not count as an access.",
)
async def get_statistics(request: Request, short_code: str):
    """Get access statistics for a short code."""
    record = await request.app.state.service.get_statistics(short_code)
    return StatsResponse.from_record(record, access_count=record.access_count)


@public_router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse, "description": "Store unreachable"}},
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    health = await request.app.state.service.health_check()

    if health["overall"]:
        return HealthResponse(status="healthy")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=HealthResponse(status="unhealthy").model_dump(),
    )


@redirect_router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={**NOT_FOUND_RESPONSE},
    summary="Redirect to original URL",
)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect a short code to its original URL, counting the access."""
    record = await request.app.state.service.get_original_url(short_code)
    return RedirectResponse(url=record.url, status_code=status.HTTP_302_FOUND)
