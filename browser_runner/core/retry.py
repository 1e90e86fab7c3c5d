"""Step-level retry with exponential backoff.

Wraps a single flaky page interaction (e.g. "click next page and wait for the
new result list"), never a whole run. Run-level retry belongs to whatever
schedules runs (status RETRYING).
"""

import logging as stdlib_logging
from typing import Any, Awaitable, Callable, Tuple, Type, TypeVar, Union

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from browser_runner.constants import Retries

T = TypeVar("T")

# Stdlib logger needed for tenacity's before_sleep_log
_stdlib_logger = stdlib_logging.getLogger(__name__)


def backoff_wait(base_delay: float) -> Any:
    """
    Build the tenacity wait strategy for ``base_delay * 2**k``.

    tenacity calls the strategy with the number of attempts already made, so
    the delay before attempt ``k`` (0-based) is ``base_delay * 2**k``.

    Args:
        base_delay: Base delay in seconds

    Returns:
        Tenacity wait strategy
    """
    return wait_exponential(multiplier=base_delay * 2, exp_base=2, min=0)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = Retries.MAX_ATTEMPTS,
    base_delay: float = Retries.BASE_DELAY,
    retry_on: Union[Type[BaseException], Tuple[Type[BaseException], ...]] = Exception,
) -> T:
    """
    Run an async operation, retrying failures with exponential backoff.

    Args:
        operation: Zero-argument coroutine function to run
        max_attempts: Total attempts including the first one
        base_delay: Base delay in seconds
        retry_on: Exception type(s) that trigger another attempt

    Returns:
        The operation's result from the first successful attempt

    Raises:
        ValueError: If max_attempts is less than 1
        Exception: The last attempt's exception, unchanged, once attempts are exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=backoff_wait(base_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=before_sleep_log(_stdlib_logger, stdlib_logging.WARNING),
        reraise=True,
    ):
        with attempt:
            return await operation()
    raise AssertionError("retry loop ended without a result")
