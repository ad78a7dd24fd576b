"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router, public_router, redirect_router
from .middleware import ForwardedHeadersMiddleware, LoggingMiddleware, register_error_handlers


def _normalize_prefix(path_prefix: str) -> str:
    prefix = (path_prefix or "").strip().strip("/")
    return "/" + prefix if prefix else ""


def create_app(service_instance, config) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: URLShortenerService instance (may be None and set
            later by the lifespan handler)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="URL shortening service",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.config = config

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)
    # Outermost, so forwarded values are on request.state for logging
    app.add_middleware(ForwardedHeadersMiddleware)

    app.include_router(api_router, prefix="/api/v1", tags=["API"])
    app.include_router(public_router, tags=["Health"])
    # Catch-all short code route goes last
    app.include_router(redirect_router, prefix=_normalize_prefix(config.path_prefix), tags=["Redirect"])

    return app
