"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from shortener.common.headers import extract_forwarded_headers


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to extract and store X-Forwarded-* headers.

    Values land on request.state so routes and logs can report the
    client-facing scheme, host and client address.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and extract forwarded headers."""
        forwarded = extract_forwarded_headers(request.headers)
        request.state.forwarded_proto = forwarded["forwarded_proto"]
        request.state.forwarded_host = forwarded["forwarded_host"]
        request.state.forwarded_for = forwarded["forwarded_for"]

        return await call_next(request)
