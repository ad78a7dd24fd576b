"""Deadline enforcement for store calls."""

import asyncio
from typing import Awaitable, TypeVar

from ..errors import ServiceError


T = TypeVar("T")


async def with_deadline(awaitable: Awaitable[T], timeout: float, op: str) -> T:
    """Await a store call, failing if it outlives the timeout.

    Cancellation of the calling task propagates unchanged; the pending call
    is abandoned either way.

    Args:
        awaitable: The store call to await
        timeout: Seconds allowed
        op: Operation name recorded on the error

    Returns:
        Whatever the awaitable returns

    Raises:
        ServiceError: INTERNAL kind when the timeout elapses
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise ServiceError.internal(op, f"request timed out after {timeout:g}s", e) from e
