"""Explicit settings for the short-code core (validator, resolver, service)."""

from dataclasses import dataclass, field
from typing import FrozenSet


DEFAULT_SHORT_CODE_LENGTH = 6
DEFAULT_MAX_RETRIES = 5
DEFAULT_MAX_URL_LENGTH = 2048
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_BLOCKED_DOMAINS = frozenset({"malware.com", "phishing.com"})

MIN_SHORT_CODE_LENGTH = 4
MAX_SHORT_CODE_LENGTH = 20


@dataclass(frozen=True)
class ShortenerSettings:
    """Settings handed to the core components at composition time.

    Attributes:
        short_code_length: Length of generated codes
        max_retries: Generate-and-check cycles before giving up
        max_url_length: Longest accepted URL
        blocked_domains: Hosts rejected by the validator (exact match, lower-case)
        request_timeout: Seconds allowed for each store call
    """

    short_code_length: int = DEFAULT_SHORT_CODE_LENGTH
    max_retries: int = DEFAULT_MAX_RETRIES
    max_url_length: int = DEFAULT_MAX_URL_LENGTH
    blocked_domains: FrozenSet[str] = field(default_factory=lambda: DEFAULT_BLOCKED_DOMAINS)
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    def __post_init__(self):
        if self.short_code_length < 0:
            raise ValueError("short_code_length must be non-negative")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")
        # Blocked entries are compared against lower-cased hosts
        object.__setattr__(
            self,
            "blocked_domains",
            frozenset(domain.strip().lower() for domain in self.blocked_domains if domain.strip()),
        )
