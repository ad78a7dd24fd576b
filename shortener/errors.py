"""Error values shared by the URL shortener core, stores and web layer."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Kind of a service failure. Callers branch on this, not on types."""

    VALIDATION = "validation"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ServiceError(Exception):
    """A failed operation tagged with its kind.

    Attributes:
        kind: What went wrong (see ErrorKind)
        op: Operation that failed, e.g. "service.create_short_url"
        message: Human-readable description
        cause: Underlying exception, if any
    """

    INTERNAL_PUBLIC_MESSAGE = "an unexpected error occurred"

    def __init__(
        self,
        kind: ErrorKind,
        op: str,
        message: str,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.op = op
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.op}: {self.message}: {self.cause}"
        return f"{self.op}: {self.message}"

    def __repr__(self) -> str:
        return f"ServiceError(kind={self.kind.value!r}, op={self.op!r}, message={self.message!r})"

    @property
    def public_message(self) -> str:
        """Message safe to show to API clients (hides internal details)."""
        if self.kind is ErrorKind.INTERNAL:
            return self.INTERNAL_PUBLIC_MESSAGE
        return self.message

    @classmethod
    def validation(cls, op: str, message: str, cause: Optional[BaseException] = None) -> "ServiceError":
        return cls(ErrorKind.VALIDATION, op, message, cause)

    @classmethod
    def duplicate(cls, op: str, message: str) -> "ServiceError":
        return cls(ErrorKind.DUPLICATE, op, message)

    @classmethod
    def not_found(cls, op: str, message: str) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, op, message)

    @classmethod
    def internal(cls, op: str, message: str, cause: Optional[BaseException] = None) -> "ServiceError":
        return cls(ErrorKind.INTERNAL, op, message, cause)
