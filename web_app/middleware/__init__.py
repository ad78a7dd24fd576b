"""Middleware for URL shortener web app."""

from .error_handling import ErrorHandlingMiddleware, register_error_handlers
from .headers import ForwardedHeadersMiddleware
from .logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "ForwardedHeadersMiddleware",
    "LoggingMiddleware",
    "register_error_handlers",
]
