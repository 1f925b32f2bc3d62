"""
Retry with exponential backoff for calls to flaky remote services.

Busuanzi times out and rate-limits under load, so its client wraps each fetch
in ``retry_with_backoff`` with the budget taken from settings.
"""

import asyncio
import logging
from collections.abc import Iterator
from functools import wraps
from typing import Awaitable, Callable, ParamSpec, TypeVar

logger = logging.getLogger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def backoff_delays(
    retries: int, initial_delay: float, exponential_base: float = 2.0, max_delay: float = 60.0
) -> Iterator[float]:
    """Yield the pause before each retry, capped at ``max_delay``."""
    delay = initial_delay
    for _ in range(retries):
        yield min(delay, max_delay)
        delay *= exponential_base


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    exponential_base: float = 2.0,
    max_delay: float = 60.0,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async callable on the given exception types.

    The callable runs once, then once more after each delay from
    ``backoff_delays``. The last failure propagates unchanged.

    Args:
        max_retries: Retries after the first attempt (0 disables retrying)
        initial_delay: Pause in seconds before the first retry
        exponential_base: Growth factor between pauses
        max_delay: Upper bound for a single pause
        exceptions: Exception types considered transient

    Example:
        >>> fetch = retry_with_backoff(
        ...     max_retries=settings.busuanzi_max_retries,
        ...     exceptions=(httpx.TransportError,),
        ... )(self._fetch_once)
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            delays = backoff_delays(max_retries, initial_delay, exponential_base, max_delay)
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    delay = next(delays, None)
                    if delay is None:
                        logger.error(f"{func.__name__} gave up after {attempt} attempt(s): {e}")
                        raise
                    logger.warning(
                        f"{func.__name__} attempt {attempt}/{max_retries + 1} failed: {e}. "
                        f"Retrying in {delay:.2f}s..."
                    )
                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
