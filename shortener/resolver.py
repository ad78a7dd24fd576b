"""Short code uniqueness resolution."""

import logging
from typing import Optional

from .errors import ServiceError
from .settings import ShortenerSettings
from .shortcode import ShortCodeGenerator, RandomSourceError
from .common.deadline import with_deadline
from .common.validators import URLValidator
from .database.base import URLStoreBase


class ShortCodeResolver:
    """Find a short code that is not yet taken in the store.

    This is a best-effort pre-check: two concurrent requests can still pick
    the same code, and the store's unique constraint rejects the second
    create. No state is kept between calls.
    """

    def __init__(
        self,
        store: URLStoreBase,
        settings: Optional[ShortenerSettings] = None,
        generator: Optional[ShortCodeGenerator] = None,
        validator: Optional[URLValidator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize resolver.

        Args:
            store: Store used for existence checks
            settings: Shortener settings (defaults if not specified)
            generator: Optional short code generator
            validator: Optional validator for custom codes
            logger: Optional logger
        """
        self.store = store
        self.settings = settings or ShortenerSettings()
        self.generator = generator or ShortCodeGenerator(default_length=self.settings.short_code_length)
        self.validator = validator or URLValidator(self.settings)
        self.logger = logger or logging.getLogger(__name__)

    async def _exists(self, short_code: str, op: str) -> bool:
        try:
            return await with_deadline(
                self.store.exists_by_code(short_code),
                self.settings.request_timeout,
                op,
            )
        except ServiceError as e:
            raise ServiceError.internal(op, "failed to check code existence", e) from e

    async def resolve_code(self, custom_code: Optional[str] = None) -> str:
        """Return a short code that is free to use.

        Args:
            custom_code: Caller-chosen code, or None to generate one

        Returns:
            The custom code unchanged, or a freshly generated free code

        Raises:
            ServiceError: VALIDATION for a malformed custom code, DUPLICATE
                if the custom code is taken, INTERNAL if an existence check
                fails or every generated code collides
        """
        if custom_code is not None:
            return await self._resolve_custom(custom_code)
        return await self._generate_unique()

    async def _resolve_custom(self, custom_code: str) -> str:
        op = "resolver.resolve_code"
        self.validator.validate_short_code(custom_code).raise_for_failure(op)

        if await self._exists(custom_code, op):
            raise ServiceError.duplicate(op, "short code already exists")

        return custom_code

    async def _generate_unique(self) -> str:
        op = "resolver.generate_unique_code"
        attempts = self.settings.max_retries

        for attempt in range(attempts):
            try:
                code = self.generator.generate(self.settings.short_code_length)
            except RandomSourceError as e:
                raise ServiceError.internal(op, "failed to generate short code", e) from e

            if not await self._exists(code, op):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

            self.logger.debug(f"Short code collision on attempt {attempt + 1}: {code}")

        raise ServiceError.internal(op, f"failed to generate unique code after {attempts} attempts")
