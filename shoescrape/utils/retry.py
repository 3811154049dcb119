# shoescrape/utils/retry.py
import asyncio
import logging
import random
from functools import wraps
from typing import Callable, Tuple, Type, TypeVar

from ..errors import NetworkError

logger = logging.getLogger(__name__)

T = TypeVar('T')


def async_retry(
    max_retries: int = 2,
    initial_backoff: float = 1.0,
    max_backoff: float = 10.0,
    backoff_factor: float = 2.0,
    jitter: bool = True,
    retryable_exceptions: Tuple[Type[BaseException], ...] = (NetworkError,),
):
    """
    Decorator for async functions to retry operations with exponential backoff

    Args:
        max_retries: Maximum number of retry attempts
        initial_backoff: Backoff time in seconds before the first retry
        max_backoff: Maximum backoff time in seconds
        backoff_factor: Multiplier for backoff time after each retry
        jitter: Whether to add randomness to backoff time
        retryable_exceptions: Tuple of exceptions that should trigger a retry.
            A NetworkError that reports itself as not retryable (4xx) is raised at once.
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            retries = 0
            backoff = initial_backoff

            while True:
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as e:
                    if isinstance(e, NetworkError) and not e.retryable:
                        raise
                    retries += 1
                    if retries > max_retries:
                        logger.debug("Max retries (%d) exceeded. Last error: %s", max_retries, e)
                        raise

                    wait = backoff
                    # Add jitter if enabled (random value between 80-120% of backoff)
                    if jitter:
                        wait = wait * (0.8 + 0.4 * random.random())

                    logger.debug("Retry %d/%d after error: %s. Waiting %.2fs before next attempt.",
                                 retries, max_retries, e, wait)
                    await asyncio.sleep(wait)
                    backoff = min(backoff * backoff_factor, max_backoff)

        return wrapper
    return decorator
