"""Bounded retry with exponential backoff for transient failures.

Only transport-level trouble is retried.  Business-rule failures are
deterministic (retrying a short cart stays short) and partial commits
already wrote data, so both surface on the first attempt.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, TypeVar

import structlog

from dispos.domain.exceptions import DomainException, TransientError

logger = structlog.get_logger()

T = TypeVar("T")

# Message fragments that identify a network-class failure.
TRANSIENT_MARKERS = ("network", "fetch", "timeout", "connection")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 1.0  # seconds

    def delay_for(self, attempt: int) -> float:
        """Wait after failed attempt ``attempt`` (1-based): 1s, 2s, 4s, ..."""
        return self.base_delay * 2 ** (attempt - 1)


def is_retryable(exc: BaseException) -> bool:
    """True for network/transport failures that are not business errors."""
    if isinstance(exc, TransientError):
        return True
    if isinstance(exc, DomainException):
        return False
    message = str(exc).lower()
    return any(marker in message for marker in TRANSIENT_MARKERS)


def retry_with_backoff(
    operation: Callable[[], T],
    policy: RetryPolicy = RetryPolicy(),
    on_retry: Callable[[int, Exception], None] | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation``, retrying transient failures per ``policy``.

    ``on_retry(attempt, error)`` is called before each wait, with the
    number of the attempt that just failed.  When attempts run out the
    last error is re-raised unchanged.
    """
    if policy.max_attempts < 1:
        raise ValueError("RetryPolicy.max_attempts must be at least 1")

    attempt = 1
    while True:
        try:
            return operation()
        except Exception as exc:
            if not is_retryable(exc) or attempt >= policy.max_attempts:
                raise

            delay = policy.delay_for(attempt)
            logger.warning(
                "retrying_after_transient_failure",
                attempt=attempt,
                max_attempts=policy.max_attempts,
                delay_seconds=delay,
                error=str(exc),
            )
            if on_retry is not None:
                on_retry(attempt, exc)
            sleep(delay)
            attempt += 1
