"""Core business logic for URL shortener."""

from .errors import ErrorKind, ServiceError
from .settings import ShortenerSettings
from .shortcode import ShortCodeGenerator, RandomSourceError, BASE62_ALPHABET
from .resolver import ShortCodeResolver
from .service import URLShortenerService

__all__ = [
    "ErrorKind",
    "ServiceError",
    "ShortenerSettings",
    "ShortCodeGenerator",
    "RandomSourceError",
    "BASE62_ALPHABET",
    "ShortCodeResolver",
    "URLShortenerService",
]
