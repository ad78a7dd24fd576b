"""Short code generation utilities."""

import secrets
import string
from typing import Optional


# Base62 characters in 0-9, a-z, A-Z order
BASE62_ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase


class RandomSourceError(Exception):
    """The operating system's secure random source is unavailable."""


class ShortCodeGenerator:
    """Generate random short codes for URLs.

    Codes double as an unguessability boundary, so characters are drawn
    from the OS CSPRNG via the secrets module, never from random.
    """

    def __init__(self, default_length: int = 6):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated codes
        """
        if default_length < 0:
            raise ValueError(f"default_length must be non-negative, got {default_length}")
        self.default_length = default_length

    def generate(self, length: Optional[int] = None) -> str:
        """Generate a random short code.

        Each character is drawn independently and uniformly from
        BASE62_ALPHABET. A length of 0 yields an empty string.

        Args:
            length: Length of the code (uses default if not specified)

        Returns:
            Random short code

        Raises:
            ValueError: If length is negative
            RandomSourceError: If the secure random source is unavailable
        """
        if length is None:
            length = self.default_length
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")

        try:
            return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))
        except (NotImplementedError, OSError) as e:
            raise RandomSourceError(f"secure random source unavailable: {e}") from e
