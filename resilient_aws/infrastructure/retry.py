"""Retry Executor — runs an attempt coroutine under a RetryPolicy.

Invariants:
    - Success ends the loop on the first outcome without an error
    - A STOP outcome raises its error as-is (no wrapping, no further attempts)
    - After policy.max_attempts retryable failures, RetriesExhaustedError chains the last error
    - Backoff sleep and attempts are cancellable: asyncio.CancelledError propagates untouched
    - overall_timeout expiry raises OperationTimeoutError; a TimeoutError raised by
      the attempt itself is not mistaken for it
    - Every failed attempt is logged at DEBUG; logging never changes control flow

Design Decisions:
    - One loop for every operation of every service: classification is injected
      through the AttemptOutcome the attempt function returns
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from resilient_aws.core.errors import (
    ErrorContext,
    OperationTimeoutError,
    RetriesExhaustedError,
)
from resilient_aws.core.retry_policy import AttemptOutcome, RetryDecision, RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

AttemptFn = Callable[[], Awaitable[AttemptOutcome[T]]]


def _error_code(error: BaseException) -> str:
    return (
        getattr(error, "remote_code", None)
        or getattr(error, "code", None)
        or type(error).__name__
    )


class RetryExecutor:
    """Generic retry loop shared by every client operation."""

    def __init__(
        self,
        policy: RetryPolicy,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.policy = policy
        self._sleep = sleep

    async def run(self, operation: str, attempt_fn: AttemptFn[T]) -> T:
        """Run attempt_fn until it succeeds, stops, or the budget runs out."""
        if self.policy.overall_timeout is None:
            return await self._loop(operation, attempt_fn)

        deadline = asyncio.timeout(self.policy.overall_timeout)
        try:
            async with deadline:
                return await self._loop(operation, attempt_fn)
        except TimeoutError as e:
            if not deadline.expired():
                raise
            raise OperationTimeoutError(
                operation, self.policy.overall_timeout,
            ) from e

    async def _loop(self, operation: str, attempt_fn: AttemptFn[T]) -> T:
        attempt = 0
        while True:
            attempt += 1
            outcome = await attempt_fn()
            if outcome.error is None:
                return outcome.result

            logger.debug(
                f"{operation} attempt {attempt} failed: {outcome.error}",
                extra={
                    "operation": operation,
                    "attempt": attempt,
                    "error_code": _error_code(outcome.error),
                },
            )
            if outcome.decision == RetryDecision.STOP:
                raise outcome.error

            if attempt >= self.policy.max_attempts:
                raise RetriesExhaustedError(
                    attempt, outcome.error,
                    ErrorContext(operation=operation, attempt=attempt),
                ) from outcome.error

            await self._sleep(self.policy.backoff(attempt))
