"""Bounded retry for ETA lookups."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from kmb_eta.services.kmb_errors import TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def execute_with_retries(
    attempts: int,
    action: Callable[[], Awaitable[T]],
    *,
    retry_on: tuple[type[BaseException], ...] = (TransportError,),
    on_retry: Callable[[BaseException, int], None] | None = None,
) -> T:
    """Run ``action`` until it succeeds, allowing ``attempts`` retries.

    Tries are strictly sequential and issued immediately after the previous
    failure. When the last try fails its exception propagates unchanged.

    Args:
        attempts: Retries allowed after the first try (0 means a single try)
        action: Zero-argument coroutine factory, called once per try
        retry_on: Exception types that trigger another try
        on_retry: Callback invoked with the swallowed error and its try number

    Raises:
        ValueError: If ``attempts`` is negative
    """
    if attempts < 0:
        raise ValueError("attempts must be zero or greater.")

    for attempt in range(1, attempts + 2):
        try:
            return await action()
        except retry_on as exc:
            if attempt > attempts:
                raise
            logger.debug("Try %d of %d failed: %s", attempt, attempts + 1, exc)
            if on_retry is not None:
                on_retry(exc, attempt)

    raise AssertionError("unreachable")


__all__ = ["execute_with_retries"]
