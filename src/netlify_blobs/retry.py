"""
Retry policy for storage requests.

Wraps a single request-send primitive with tenacity. Transient failures are
retried: transport errors, HTTP 429 and HTTP 5xx. Waits grow exponentially,
except for rate-limited responses carrying a reset hint.
"""
from __future__ import annotations

import logging
import time
from typing import Awaitable, Callable, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from .headers import RATE_LIMIT_RESET
from .settings import Settings

__all__ = ["RetryPolicy", "is_retryable_status"]

logger = logging.getLogger(__name__)


def is_retryable_status(status_code: int) -> bool:
    """Whether a response status is transient and worth another attempt."""
    return status_code == 429 or 500 <= status_code <= 599


def _is_retryable_response(response: httpx.Response) -> bool:
    return is_retryable_status(response.status_code)


class RetryPolicy:
    """
    Retry behaviour shared by every storage request of a store.

    Attributes:
        attempts: Total number of attempts, including the first one
        delay_s: Base delay of the exponential backoff and lower bound of any wait
        max_delay_s: Upper bound of any wait
    """

    def __init__(self, attempts: int = 5, delay_s: float = 1.0, max_delay_s: float = 20.0):
        self.attempts = attempts
        self.delay_s = delay_s
        self.max_delay_s = max_delay_s
        self._backoff = wait_exponential(multiplier=delay_s, min=delay_s, max=max_delay_s)

    @classmethod
    def from_settings(cls, settings: Settings) -> RetryPolicy:
        return cls(
            attempts=settings.retry_attempts,
            delay_s=settings.retry_delay_s,
            max_delay_s=settings.retry_max_delay_s,
        )

    async def call(self, send: Callable[[], Awaitable[httpx.Response]]) -> httpx.Response:
        """
        Run `send` until it yields a non-retryable response or attempts run out.

        Returns:
            The last response, whatever its status

        Raises:
            httpx.TransportError: If the final attempt failed at transport level
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=self._wait,
            retry=(
                retry_if_exception_type(httpx.TransportError)
                | retry_if_result(_is_retryable_response)
            ),
            before_sleep=self._log_retry,
            retry_error_callback=_last_outcome,
        )
        return await retrying(send)

    def _wait(self, retry_state: RetryCallState) -> float:
        delay = self._rate_limit_delay(retry_state)
        if delay is not None:
            return delay
        return self._backoff(retry_state)

    def _rate_limit_delay(self, retry_state: RetryCallState) -> Optional[float]:
        outcome = retry_state.outcome
        if outcome is None or outcome.failed:
            return None

        response = outcome.result()
        if response.status_code != 429:
            return None

        reset = response.headers.get(RATE_LIMIT_RESET)
        if not reset:
            return None

        try:
            delay = float(reset) - time.time()
        except ValueError:
            return None

        return min(max(delay, self.delay_s), self.max_delay_s)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        if outcome is not None and outcome.failed:
            reason = f"{type(outcome.exception()).__name__}"
        elif outcome is not None:
            reason = f"HTTP {outcome.result().status_code}"
        else:
            reason = "unknown"
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.warning(
            f"Storage request failed ({reason}), retrying in {wait:.2f}s "
            f"(attempt {retry_state.attempt_number}/{self.attempts})"
        )


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    # Re-raises the transport error when the last attempt raised one
    return retry_state.outcome.result()
