"""Resilient API call decorator built on tenacity.

Retries 3 times with exponential backoff and jitter, logging a warning before
each retry and an error once the attempts are exhausted, then re-raises the
last exception so callers can map it to an HTTP error.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import openai
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])

# Client errors that will not succeed on retry
_NON_RETRYABLE_STATUS = frozenset({400, 401, 403, 404, 409, 422})


def is_retryable(exc: BaseException) -> bool:
    """Return True for transient failures (network errors, 429 and 5xx responses)."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code not in _NON_RETRYABLE_STATUS
    if isinstance(exc, openai.APIStatusError):
        return exc.status_code not in _NON_RETRYABLE_STATUS
    return isinstance(exc, (httpx.TransportError, openai.APIConnectionError))


def log_final_failure(retry_state: RetryCallState) -> Any:
    """Log the exhausted call and re-raise its last exception.

    Args:
        retry_state: Tenacity retry state with attempt info and exception.
    """
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    api_name = getattr(retry_state.fn, "_api_name", "unknown") if retry_state.fn else "unknown"

    logger.error(
        "api_call_failed_after_retries",
        api_name=api_name,
        attempts=retry_state.attempt_number,
        exception=str(exception),
    )
    if retry_state.outcome is None:
        return None
    return retry_state.outcome.result()


def _before_sleep_log(retry_state: RetryCallState) -> None:
    """Log a warning before each retry attempt.

    Args:
        retry_state: Tenacity retry state with attempt info.
    """
    api_name = getattr(retry_state.fn, "_api_name", "unknown") if retry_state.fn else "unknown"
    logger.warning(
        "retrying_api_call",
        api_name=api_name,
        attempt=retry_state.attempt_number,
        wait=retry_state.next_action.sleep if retry_state.next_action else 0,
    )


def resilient_api_call(api_name: str, attempts: int = 3) -> Callable[[F], F]:
    """Create a retry decorator for an API call.

    The decorator is configured with:
    - *attempts* attempts maximum (3 by default)
    - Exponential backoff with jitter (1s initial, 30s max, 5s jitter)
    - Retries only for transient errors (see ``is_retryable``)
    - Warning log before each retry, error log on final failure
    - Original exception re-raised after exhaustion

    Args:
        api_name: Human-readable name for the API (used in logs).
        attempts: Maximum number of attempts.

    Returns:
        A decorator that wraps the function with retry logic.
    """

    def decorator(func: F) -> F:
        # Store api_name on function for the logging callbacks
        func._api_name = api_name  # type: ignore[attr-defined]

        wrapped = retry(
            stop=stop_after_attempt(attempts),
            wait=wait_exponential_jitter(initial=1, max=30, jitter=5),
            retry=retry_if_exception(is_retryable),
            before_sleep=_before_sleep_log,
            retry_error_callback=log_final_failure,
            reraise=True,
        )(func)

        return wrapped

    return decorator
