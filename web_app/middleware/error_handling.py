"""
Error handling for consistent error responses.
"""

import logging
from typing import Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shortener.errors import ErrorKind, ServiceError

logger = logging.getLogger("shortener.web")


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_TITLES = {
    ErrorKind.VALIDATION: "Bad Request",
    ErrorKind.NOT_FOUND: "Not Found",
    ErrorKind.DUPLICATE: "Conflict",
    ErrorKind.INTERNAL: "Internal Server Error",
}


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    """Build an error body of the form {error, message, code}."""
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "code": status_code},
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Convert a ServiceError to the response for its kind.

    Internal errors are logged with their cause; clients only see a
    generic message.
    """
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if exc.kind is ErrorKind.INTERNAL:
        logger.error(f"Internal error in {request.url.path}: {exc}", exc_info=exc.cause is not None)
    else:
        logger.warning(f"API error in {request.url.path}: {exc}")
    return error_response(status_code, ERROR_TITLES.get(exc.kind, "Error"), exc.public_message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed request bodies with 400."""
    logger.warning(f"Invalid request payload for {request.url.path}: {exc.errors()}")
    return error_response(status.HTTP_400_BAD_REQUEST, "Bad Request", "Invalid request payload")


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn unhandled exceptions into a 500 response."""

    async def dispatch(self, request: Request, call_next: Callable):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error in {request.url.path}: {e}", exc_info=True)
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal Server Error",
                "Internal server error",
            )


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers and the recovery middleware on app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_middleware(ErrorHandlingMiddleware)
