"""
Retry helper for page operations that can fail transiently

Usage:
    from longshot_core.retry import retry_async

    @retry_async(max_attempts=2, delay=0.5, retryable_exceptions=(GeometryError,))
    async def measure(page, element):
        ...
"""

import asyncio
import logging
from functools import wraps
from typing import Callable, Tuple, Type

logger = logging.getLogger(__name__)


def retry_async(
    max_attempts: int = 2,
    delay: float = 0.5,
    retryable_exceptions: Tuple[Type[Exception], ...] = (TimeoutError,),
):
    """
    Decorator retrying an async function with a fixed pause.

    Args:
        max_attempts: Total number of attempts, including the first one
        delay: Pause between attempts in seconds
        retryable_exceptions: Exceptions that trigger another attempt

    The last exception is re-raised unchanged when attempts run out.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt == max_attempts:
                        logger.error(
                            f"Retry exhausted for {func.__name__} after {max_attempts} attempts: {e}"
                        )
                        raise
                    logger.warning(
                        f"Attempt {attempt}/{max_attempts} failed for {func.__name__}: {e}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)

        return wrapper
    return decorator
