"""Common utilities for URL shortener."""

from .validators import URLValidator, ValidationOutcome, ValidationReason
from .deadline import with_deadline
from .headers import extract_forwarded_headers, build_base_url
from .url_builder import build_short_url, build_public_short_url
from .logging_config import setup_logging

__all__ = [
    "URLValidator",
    "ValidationOutcome",
    "ValidationReason",
    "with_deadline",
    "extract_forwarded_headers",
    "build_base_url",
    "build_short_url",
    "build_public_short_url",
    "setup_logging",
]
