"""
Consistent retry behavior for backend reads.
Bounded retries, exponential backoff, idempotent operations only.
"""
import asyncio
import functools
from typing import Callable, Optional

from storefront.errors import RetryExhaustedError
from storefront.config import config
from storefront.logger import logger


def async_retry(
    max_retries: Optional[int] = None,
    backoff_factor: Optional[float] = None,
    exceptions: tuple = (Exception,)
):
    """
    Retry decorator for async functions.

    Args:
        max_retries: Maximum retry attempts (default from config, read per call)
        backoff_factor: Exponential backoff factor (default from config)
        exceptions: Exceptions to catch and retry
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            max_tries = max_retries if max_retries is not None else config.MAX_RETRIES
            backoff = backoff_factor if backoff_factor is not None else config.RETRY_BACKOFF

            for attempt in range(max_tries + 1):
                try:
                    if attempt > 0:
                        logger.info(
                            f"Retry attempt {attempt}/{max_tries} for {func.__name__}"
                        )

                    return await func(*args, **kwargs)

                except exceptions as e:
                    if attempt == max_tries:
                        logger.error(
                            f"Max retries ({max_tries}) exhausted for {func.__name__}: {e}"
                        )
                        raise RetryExhaustedError(
                            f"{func.__name__} failed after {max_tries} retries: {str(e)}"
                        ) from e

                    delay = backoff ** attempt
                    logger.warning(
                        f"Attempt {attempt + 1}/{max_tries + 1} failed for {func.__name__}. "
                        f"Retrying in {delay:.2f}s. Error: {e}"
                    )

                    await asyncio.sleep(delay)

        return wrapper
    return decorator
