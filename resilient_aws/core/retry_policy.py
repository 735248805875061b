"""Retry Policy — attempt budget, backoff schedule, and per-attempt outcomes.

Invariants:
    - RetryPolicy is frozen: built once per client, read-only afterwards
    - backoff(attempt) is in [0, max_delay] for every attempt >= 1
    - AttemptOutcome with error=None always means success, whatever the decision says
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_MIN_DELAY_SECONDS = 0.1
DEFAULT_MAX_DELAY_SECONDS = 10.0


class RetryDecision(str, Enum):
    """What the retry loop should do after a failed attempt."""
    RETRY = "retry"
    STOP = "stop"


@dataclass(frozen=True)
class AttemptOutcome(Generic[T]):
    """Result of a single attempt as seen by the retry loop."""
    decision: RetryDecision
    result: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, result: T) -> "AttemptOutcome[T]":
        return cls(RetryDecision.STOP, result=result)

    @classmethod
    def retry(cls, error: Exception) -> "AttemptOutcome[T]":
        return cls(RetryDecision.RETRY, error=error)

    @classmethod
    def stop(cls, error: Exception) -> "AttemptOutcome[T]":
        return cls(RetryDecision.STOP, error=error)

    @property
    def should_retry(self) -> bool:
        return self.error is not None and self.decision == RetryDecision.RETRY


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and exponential backoff with jitter.

    attempt_timeout bounds a single remote call; overall_timeout bounds the
    whole loop including sleeps. Either may be None (unbounded).
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    min_delay: float = DEFAULT_MIN_DELAY_SECONDS
    max_delay: float = DEFAULT_MAX_DELAY_SECONDS
    jitter: bool = True
    attempt_timeout: float | None = None
    overall_timeout: float | None = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.min_delay < 0 or self.max_delay < 0:
            raise ValueError("retry delays must be non-negative")
        if self.max_delay < self.min_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= min_delay ({self.min_delay})",
            )
        for name in ("attempt_timeout", "overall_timeout"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def backoff(
        self, attempt: int, rng: Callable[[float, float], float] = random.uniform,
    ) -> float:
        """Delay in seconds before the attempt following `attempt` (1-based).

        Exponential from min_delay, capped at max_delay. Jitter scales the
        delay into [50%, 100%] of the capped value.
        """
        exponent = max(attempt - 1, 0)
        # Cap the exponent so huge attempt counts cannot overflow the float.
        delay = min(self.max_delay, self.min_delay * (2 ** min(exponent, 62)))
        if self.jitter:
            delay *= rng(0.5, 1.0)  # nosec B311
        return max(0.0, min(delay, self.max_delay))
