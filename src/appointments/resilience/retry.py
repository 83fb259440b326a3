"""Retry policy for store-level transient failures.

Only errors flagged ``retryable`` (optimistic-write conflicts and store
outages) are retried.  Each attempt re-runs the whole load-validate-persist
cycle, so a retried action is validated again against the fresh status;
business-rule refusals are raised on the first attempt.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from appointments.domain.errors import AppointmentError

logger = structlog.get_logger()

T = TypeVar("T")


def is_retryable(exc: BaseException) -> bool:
    """Return True for domain errors a caller may safely repeat."""
    return isinstance(exc, AppointmentError) and exc.retryable


def _before_sleep_log(retry_state: RetryCallState) -> None:
    """Log a warning before each retry attempt."""
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "retrying_store_operation",
        operation=getattr(retry_state.fn, "__name__", "unknown"),
        attempt=retry_state.attempt_number,
        error=type(exception).__name__ if exception else None,
        wait=retry_state.next_action.sleep if retry_state.next_action else 0,
    )


def call_with_retry(
    func: Callable[..., T],
    *args: Any,
    attempts: int = 3,
    initial_wait: float = 0.05,
    max_wait: float = 1.0,
    **kwargs: Any,
) -> T:
    """Call *func*, retrying retryable domain errors.

    Uses exponential backoff with jitter; the original exception is
    re-raised once attempts are exhausted.

    Args:
        func: The operation to run.
        attempts: Maximum number of attempts (1 disables retrying).
        initial_wait: First backoff in seconds.
        max_wait: Upper bound for a single backoff.

    Returns:
        Whatever *func* returns.
    """
    retrying = Retrying(
        retry=retry_if_exception(is_retryable),
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_exponential_jitter(initial=initial_wait, max=max_wait, jitter=initial_wait),
        before_sleep=_before_sleep_log,
        reraise=True,
    )
    return retrying(func, *args, **kwargs)
