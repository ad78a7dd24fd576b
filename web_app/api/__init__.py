"""REST API for the URL shortener."""

from .routes import router as api_router, public_router, redirect_router

__all__ = ["api_router", "public_router", "redirect_router"]
