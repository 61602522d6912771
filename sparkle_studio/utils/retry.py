"""Bounded retry for text-generation calls that hit transient overload."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from ..errors import EmptyResult


logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_MARKERS = ("503", "overloaded", "service unavailable")


def is_transient_error(error: BaseException) -> bool:
    """True if the error message signals overload or unavailability."""
    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def _never_empty(result: Any) -> bool:
    return False


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    delay: float = 2.0,
    *,
    is_empty: Callable[[T], bool] | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Run an async operation with a fixed-delay retry on transient errors.

    Args:
        operation: Zero-argument coroutine function to attempt
        max_attempts: Total attempts, including the first
        delay: Seconds to wait between attempts (constant, no backoff)
        is_empty: Optional predicate marking a successful result as unusable.
            An empty result is retried after the same delay; on the final
            attempt it raises EmptyResult.
        sleep: Awaitable used for the wait. Cancelling the caller aborts it.

    Returns:
        The first usable result

    Raises:
        EmptyResult: every attempt returned an empty result
        Exception: the last transient error once attempts run out, or any
            non-transient error immediately
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    def log_retry(state: RetryCallState) -> None:
        outcome = state.outcome
        reason = f"a transient error ({outcome.exception()})" if outcome.failed else "an empty result"
        logger.warning(
            f"Attempt {state.attempt_number}/{max_attempts} hit {reason}; retrying in {delay}s"
        )

    def give_up(state: RetryCallState):
        outcome = state.outcome
        if outcome.failed:
            logger.error(f"All {max_attempts} attempts failed. Last error: {outcome.exception()}")
            raise outcome.exception()
        raise EmptyResult(
            f"No usable result after {max_attempts} attempts. The response might have been empty."
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(delay),
        retry=retry_if_exception(is_transient_error) | retry_if_result(is_empty or _never_empty),
        sleep=sleep,
        before_sleep=log_retry,
        retry_error_callback=give_up,
        reraise=True,
    )
    return await retrying(operation)
