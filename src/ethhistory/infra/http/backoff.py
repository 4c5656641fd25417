"""Retry with exponential backoff and jitter for upstream calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from ethhistory.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BackoffPolicy:
    """Delay before attempt n+1 is min(base_delay * 2**(n-1), max_delay) + U[0, jitter)."""

    max_attempts: int = 6
    base_delay: float = 1.0
    max_delay: float = 10.0
    jitter: float = 0.25

    @classmethod
    def from_settings(cls, settings) -> "BackoffPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
        )


class BackoffExecutor:
    """Runs async operations, retrying transient upstream failures.

    Only ExternalServiceError (and subclasses) is retried. Anything else,
    including PermanentServiceError, propagates on the first attempt. When
    attempts run out the last exception is re-raised as-is.
    """

    def __init__(
        self,
        policy: BackoffPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._policy = policy or BackoffPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> BackoffPolicy:
        return self._policy

    def _log_retry(self, label: str) -> Callable[[RetryCallState], None]:
        def before_sleep(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome else None
            delay = state.next_action.sleep if state.next_action else 0.0
            logger.warning(
                "%s failed (attempt %d/%d), retrying in %.2fs: %s",
                label, state.attempt_number, self._policy.max_attempts, delay, exc,
            )

        return before_sleep

    async def run(self, operation: Callable[[], Awaitable[T]], label: str = "operation") -> T:
        policy = self._policy
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(ExternalServiceError),
            stop=stop_after_attempt(policy.max_attempts),
            wait=wait_exponential(multiplier=policy.base_delay, max=policy.max_delay)
            + wait_random(0, policy.jitter),
            before_sleep=self._log_retry(label),
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await operation()
        raise AssertionError("unreachable: tenacity re-raises once attempts run out")
