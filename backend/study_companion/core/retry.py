"""
Exponential-backoff retry for eventually-consistent vector index calls.

An operation is retried when it raises OR when it returns an empty sequence:
a search issued right after an upsert often sees nothing until the index has
propagated the write.

  attempt 1 fails → sleep initial_delay
  attempt 2 fails → sleep initial_delay * 2
  ...
  last attempt raises → MaxRetriesExceeded
  last attempt empty  → the empty result is returned as-is
  CredentialMissing   → raised immediately, never retried
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_not_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from study_companion.core.exceptions import CredentialMissing, MaxRetriesExceeded

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_empty_sequence(result: object) -> bool:
    return isinstance(result, Sequence) and not isinstance(result, (str, bytes)) and len(result) == 0


def _log_retry(retry_state: RetryCallState) -> None:
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    attempt = retry_state.attempt_number
    max_attempts = retry_state.retry_object.stop.max_attempt_number
    if retry_state.outcome.failed:
        logger.warning(
            f"⚠️ Error occurred ({retry_state.outcome.exception()}), retrying in {delay:g}s "
            f"(Attempt {attempt}/{max_attempts})"
        )
    else:
        logger.info(f"🔄 No results found in index yet, retrying in {delay:g}s (Attempt {attempt}/{max_attempts})")


def _on_exhausted(retry_state: RetryCallState):
    outcome = retry_state.outcome
    if outcome.failed:
        error = outcome.exception()
        raise MaxRetriesExceeded(retry_state.attempt_number, str(error)) from error
    return outcome.result()


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 5,
    initial_delay: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run `operation` until it returns a non-empty result or attempts run out.

    Args:
        operation: Zero-argument callable returning an awaitable, called once per attempt.
        max_attempts: Total number of attempts (not retries).
        initial_delay: Seconds to wait before the first retry; doubles each time.
        sleep: Awaitable sleep, injectable for tests.

    Returns:
        The first non-empty result, or the last (empty) result when attempts run out.

    Raises:
        MaxRetriesExceeded: If the final attempt raised.
        CredentialMissing: Passed through on the first occurrence.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=initial_delay, exp_base=2, min=0, max=float("inf")),
        retry=retry_if_not_exception_type(CredentialMissing) | retry_if_result(_is_empty_sequence),
        before_sleep=_log_retry,
        retry_error_callback=_on_exhausted,
        sleep=sleep,
    )

    async def attempt() -> T:
        return await operation()

    return await retrying(attempt)
