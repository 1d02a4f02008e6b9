"""Pluggable retry policies for calls to the embedding service.

The reference behaviour is a single attempt (:class:`NoRetry`). Callers
that want resilience against transient failures plug in
:class:`ExponentialBackoff` or their own :class:`RetryPolicy`.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, TypeVar

from rag_ingest.errors import EmbeddingAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy(ABC):
    """Decides whether a failed call is attempted again, and after how long."""

    @abstractmethod
    def should_retry(self, error: Exception, attempt: int) -> bool:
        """Return ``True`` to retry after *attempt* (1-based) failed with *error*."""
        ...

    def wait_seconds(self, attempt: int) -> float:
        return 0.0

    def call(self, fn: Callable[[], T], *, description: str = "request") -> T:
        """Run *fn*, retrying as long as :meth:`should_retry` allows."""
        attempt = 1
        while True:
            try:
                return fn()
            except Exception as exc:
                if not self.should_retry(exc, attempt):
                    raise
                wait = self.wait_seconds(attempt)
                logger.warning("Retry %d for %s (wait %.1fs): %s", attempt, description, wait, exc)
                time.sleep(wait)
                attempt += 1


class NoRetry(RetryPolicy):
    """Single attempt; every failure surfaces immediately."""

    def should_retry(self, error: Exception, attempt: int) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoRetry()"


class ExponentialBackoff(RetryPolicy):
    """Retry transient API failures with exponentially growing waits.

    Parameters
    ----------
    max_attempts:
        Total attempts including the first one.
    base:
        Wait after attempt *n* is ``base ** n`` seconds ...
    max_wait:
        ... capped at this many seconds.
    """

    def __init__(self, max_attempts: int = 3, *, base: float = 2.0, max_wait: float = 30.0) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.base = base
        self.max_wait = max_wait

    def should_retry(self, error: Exception, attempt: int) -> bool:
        # Malformed success bodies are not transient.
        return attempt < self.max_attempts and isinstance(error, EmbeddingAPIError) and error.retryable

    def wait_seconds(self, attempt: int) -> float:
        return min(self.base**attempt, self.max_wait)

    def __repr__(self) -> str:
        return f"ExponentialBackoff(max_attempts={self.max_attempts}, base={self.base}, max_wait={self.max_wait})"


def retry_policy_for(max_retries: int) -> RetryPolicy:
    """Map a retry count from configuration onto a policy."""
    if max_retries <= 0:
        return NoRetry()
    return ExponentialBackoff(max_attempts=max_retries + 1)
