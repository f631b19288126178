"""Retry-with-backoff helper used by every retrying outbound call site."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DelayFunction = Callable[[int], float]
RetryPredicate = Callable[[BaseException], bool]


def linear_delay(base_delay: float) -> DelayFunction:
    """Build a delay function returning ``attempt * base_delay`` seconds.

    Args:
        base_delay: Delay in seconds after the first failed attempt

    Returns:
        Function mapping the 1-based attempt index to a delay
    """
    return lambda attempt: attempt * base_delay


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int,
    delay: DelayFunction,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    should_retry: Optional[RetryPredicate] = None,
    description: str = "operation",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run an async operation, retrying failures with a delay between attempts.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt
        max_attempts: Total number of attempts, at least 1
        delay: Maps the 1-based index of the failed attempt to a sleep in seconds
        retry_on: Exception types that trigger a retry; others propagate at once
        should_retry: Optional predicate to veto retrying a matching exception
        description: Label used in log messages
        sleep: Awaitable sleep, injectable for tests

    Returns:
        Result of the first successful attempt

    Raises:
        The last exception once attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except retry_on as e:
            if should_retry is not None and not should_retry(e):
                raise
            if attempt == max_attempts:
                logger.error(f"{description} failed after {max_attempts} attempts: {e}")
                raise

            wait = delay(attempt)
            logger.warning(
                f"{description} failed (attempt {attempt}/{max_attempts}). "
                f"Retrying in {wait:.2f}s: {e}"
            )
            await sleep(wait)

    raise RuntimeError(f"{description} failed after all retries")
