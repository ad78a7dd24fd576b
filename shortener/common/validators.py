"""Validation utilities for URL shortener."""

import re
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

from ..errors import ServiceError
from ..settings import ShortenerSettings, MIN_SHORT_CODE_LENGTH, MAX_SHORT_CODE_LENGTH
from ..shortcode import BASE62_ALPHABET


ALLOWED_SCHEMES = ("http", "https")

_BASE62_SET = frozenset(BASE62_ALPHABET)


class ValidationReason(str, Enum):
    """Why a URL or short code was rejected."""

    URL_TOO_LONG = "URL too long"
    INVALID_FORMAT = "invalid URL format"
    UNSUPPORTED_SCHEME = "only HTTP and HTTPS URLs are allowed"
    DOMAIN_BLOCKED = "domain is blocked"
    LENGTH_OUT_OF_RANGE = "length out of range"
    NON_ALPHANUMERIC = "non-alphanumeric character"


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of a single validation call. Truthy when the input passed."""

    reason: Optional[ValidationReason] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> str:
        return "" if self.reason is None else self.reason.value

    def __bool__(self) -> bool:
        return self.ok

    def raise_for_failure(self, op: str) -> None:
        """Raise a validation ServiceError if this outcome is a failure.

        Args:
            op: Operation name recorded on the error
        """
        if self.reason is not None:
            raise ServiceError.validation(op, self.reason.value)


VALID = ValidationOutcome()


def _has_control_characters(value: str) -> bool:
    return any(ord(c) < 0x20 or ord(c) == 0x7F for c in value)


# ASCII allowed in a host[:port]; non-ASCII (IDN) hosts pass through
_HOST_CHARS = frozenset(string.ascii_letters + string.digits + "-._~!$&'()*+,;=:[]<>\"%")

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _has_invalid_host_characters(host: str) -> bool:
    return any(ord(c) < 0x80 and c not in _HOST_CHARS for c in host)


def _host_with_port(netloc: str) -> str:
    """Strip userinfo from a netloc, keeping the port."""
    return netloc.rpartition("@")[2]


class URLValidator:
    """Gatekeeper for externally supplied URLs and custom short codes.

    Only static settings are consulted (max URL length, blocked domains);
    uniqueness is checked elsewhere.
    """

    def __init__(self, settings: Optional[ShortenerSettings] = None):
        """Initialize validator.

        Args:
            settings: Shortener settings (defaults if not specified)
        """
        settings = settings or ShortenerSettings()
        self.max_url_length = settings.max_url_length
        self.blocked_domains = settings.blocked_domains

    def validate_url(self, raw: str) -> ValidationOutcome:
        """Validate a URL.

        Args:
            raw: The URL to validate

        Returns:
            ValidationOutcome (falsy with a reason when rejected)
        """
        # Counted in characters, not UTF-8 bytes
        if len(raw) > self.max_url_length:
            return ValidationOutcome(ValidationReason.URL_TOO_LONG)

        if _has_control_characters(raw):
            return ValidationOutcome(ValidationReason.INVALID_FORMAT)

        try:
            parts = urlsplit(raw)
            # Accessing port validates it
            parts.port
        except ValueError:
            return ValidationOutcome(ValidationReason.INVALID_FORMAT)

        host = _host_with_port(parts.netloc)
        if _has_invalid_host_characters(host):
            return ValidationOutcome(ValidationReason.INVALID_FORMAT)

        # Query strings are kept raw; only host, path and fragment are decoded
        if any(_BAD_ESCAPE.search(part) for part in (host, parts.path, parts.fragment)):
            return ValidationOutcome(ValidationReason.INVALID_FORMAT)

        # urlsplit lower-cases the scheme
        if parts.scheme not in ALLOWED_SCHEMES:
            return ValidationOutcome(ValidationReason.UNSUPPORTED_SCHEME)

        # Host includes any port, so "malware.com:8080" is not "malware.com"
        if self.is_domain_blocked(host):
            return ValidationOutcome(ValidationReason.DOMAIN_BLOCKED)

        return VALID

    def validate_short_code(self, code: str) -> ValidationOutcome:
        """Validate the shape of a custom short code.

        Args:
            code: The short code to validate

        Returns:
            ValidationOutcome (falsy with a reason when rejected)
        """
        if len(code) < MIN_SHORT_CODE_LENGTH or len(code) > MAX_SHORT_CODE_LENGTH:
            return ValidationOutcome(ValidationReason.LENGTH_OUT_OF_RANGE)

        if any(c not in _BASE62_SET for c in code):
            return ValidationOutcome(ValidationReason.NON_ALPHANUMERIC)

        return VALID

    def is_domain_blocked(self, host: str) -> bool:
        """Exact, case-insensitive match against the blocked set.

        Subdomains of a blocked domain are not blocked.
        """
        return host.lower() in self.blocked_domains
