"""
Backoff policy for retryable invocation failures.

The wait before the next attempt depends on why the last one failed:

    rate limited   -> the server's Retry-After, or a fixed default
    server error   -> base_delay * exponential_base ** attempt
    network error  -> same exponential curve as server errors
    timeout        -> a short fixed delay
"""

from __future__ import annotations

import random

from pydantic import BaseModel

from .classifier import ErrorClassification, FailureCause


class BackoffPolicy(BaseModel):
    """Configuration for per-cause retry delays.

    Attributes:
        rate_limit_default_delay: Seconds to wait on 429 without Retry-After.
        timeout_delay: Seconds to wait after a timed-out attempt.
        base_delay: Multiplier for the exponential curve.
        exponential_base: Base of the exponential curve.
        max_delay: Optional cap for exponential delays (None = uncapped).
        jitter: Whether to add up to 25% random jitter to exponential delays.
    """

    rate_limit_default_delay: float = 5.0
    timeout_delay: float = 1.0
    base_delay: float = 1.0
    exponential_base: float = 2.0
    max_delay: float | None = None
    jitter: bool = False

    model_config = {"frozen": True}

    def exponential_delay(self, attempt: int) -> float:
        """Calculate the exponential delay after a given attempt.

        Args:
            attempt: The attempt that just failed (1-indexed).

        Returns:
            Delay in seconds: 2, 4, 8, ... with the default settings.
        """
        delay = self.base_delay * (self.exponential_base**attempt)
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)

        if self.jitter:
            delay += delay * 0.25 * random.random()

        return delay

    def delay_for(self, classification: ErrorClassification, attempt: int) -> float:
        """Calculate the delay before the attempt following `attempt`.

        Args:
            classification: Classification of the failed attempt.
            attempt: The attempt that just failed (1-indexed).

        Returns:
            Delay in seconds.

        Raises:
            ValueError: If the classification is not retryable.
        """
        if not classification.retryable:
            raise ValueError(f"No backoff for non-retryable {classification.kind.value}")

        cause = classification.cause
        if cause is FailureCause.RATE_LIMITED:
            if classification.retry_after is not None:
                return classification.retry_after
            return self.rate_limit_default_delay

        if cause is FailureCause.TIMEOUT:
            return self.timeout_delay

        # Network and server errors share the exponential curve
        return self.exponential_delay(attempt)


DEFAULT_BACKOFF_POLICY = BackoffPolicy()
