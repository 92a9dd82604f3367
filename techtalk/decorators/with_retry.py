"""Tenacity-backed retry for infrastructure calls."""

from collections.abc import Awaitable, Callable

from sqlalchemy.exc import InterfaceError, OperationalError
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from techtalk.monitoring import get_logger

logger = get_logger(__name__)

type ExceptionTypes = type[Exception] | tuple[type[Exception], ...]

# Connection-level failures only; constraint violations are never retried
RETRIABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    OperationalError,
    InterfaceError,
)


def _warn_before_retry(attempts: int) -> Callable[[RetryCallState], None]:
    def before_sleep(state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        delay = state.next_action.sleep if state.next_action else 0
        name = getattr(state.fn, "__name__", "call")
        logger.warning(
            f"{name} failed (attempt {state.attempt_number}/{attempts}), "
            f"retrying in {delay:.2f}s: {error!r}",
        )

    return before_sleep


def with_retry[**P, T](
    max_retries: int = 3,
    base_delay: float = 0.1,
    max_delay: float = 2.0,
    exec_retry: ExceptionTypes = RETRIABLE_EXCEPTIONS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Retry an async callable with exponential backoff.

    Post writes, slug assignment and other business operations are not
    wrapped: a retry there could publish a post twice.

    Args:
        max_retries: Total attempts, including the first.
        base_delay: First backoff delay in seconds.
        max_delay: Backoff ceiling in seconds.
        exec_retry: Exception type(s) that trigger another attempt.
    """
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=base_delay, min=base_delay, max=max_delay),
        retry=retry_if_exception_type(exec_retry),
        before_sleep=_warn_before_retry(max_retries),
        reraise=True,
    )
