"""Unit tests for the retry-with-backoff helper."""

import pytest
from structlog.testing import capture_logs

from dispos.application.retry import RetryPolicy, is_retryable, retry_with_backoff
from dispos.domain.exceptions import (
    InsufficientInventoryError,
    PartialCommitError,
    PersistenceError,
    TransientError,
)


class _Flaky:
    """Fails with the given errors, one per call, then returns 'ok'."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


class TestClassification:

    @pytest.mark.parametrize("message", [
        "Network request failed",
        "Failed to fetch",
        "Request TIMEOUT",
        "connection refused",
    ])
    def test_transport_messages_are_retryable(self, message):
        assert is_retryable(RuntimeError(message))

    def test_transient_error_is_retryable(self):
        assert is_retryable(TransientError("flaky mount"))

    def test_business_errors_are_not_retryable(self):
        assert not is_retryable(InsufficientInventoryError("Gummies", 1, 2, "package"))
        assert not is_retryable(PersistenceError("connection lost mid-write"))

    def test_other_errors_are_not_retryable(self):
        assert not is_retryable(ValueError("bad input"))


class TestRetryWithBackoff:

    def test_network_error_retried_until_success(self):
        operation = _Flaky(RuntimeError("network down"), RuntimeError("network down"))
        delays = []

        assert retry_with_backoff(operation, sleep=delays.append) == "ok"

        assert operation.calls == 3
        assert delays == [1.0, 2.0]

    def test_gives_up_after_max_attempts(self):
        operation = _Flaky(*(TransientError(f"timeout {i}") for i in range(5)))
        delays = []

        with pytest.raises(TransientError, match="timeout 2"):
            retry_with_backoff(operation, sleep=delays.append)

        assert operation.calls == 3
        assert delays == [1.0, 2.0]

    def test_inventory_error_not_retried(self):
        operation = _Flaky(InsufficientInventoryError("Gummies", 1, 2, "package"))
        delays = []

        with pytest.raises(InsufficientInventoryError):
            retry_with_backoff(operation, sleep=delays.append)

        assert operation.calls == 1
        assert delays == []

    def test_partial_commit_not_retried(self):
        error = PartialCommitError("timeout after insert", transaction=None, committed_items=[])
        operation = _Flaky(error)

        with pytest.raises(PartialCommitError):
            retry_with_backoff(operation, sleep=lambda _: None)

        assert operation.calls == 1

    def test_on_retry_called_before_each_wait(self):
        operation = _Flaky(TransientError("a"), TransientError("b"))
        seen = []

        retry_with_backoff(
            operation,
            on_retry=lambda attempt, exc: seen.append((attempt, str(exc))),
            sleep=lambda _: None,
        )

        assert seen == [(1, "a"), (2, "b")]

    def test_custom_policy(self):
        operation = _Flaky(TransientError("x"), TransientError("x"), TransientError("x"))
        delays = []

        retry_with_backoff(operation, RetryPolicy(max_attempts=4, base_delay=0.5), sleep=delays.append)

        assert delays == [0.5, 1.0, 2.0]

    def test_retries_are_logged(self):
        operation = _Flaky(TransientError("x"))
        with capture_logs() as logs:
            retry_with_backoff(operation, sleep=lambda _: None)
        assert logs[0]["event"] == "retrying_after_transient_failure"
        assert logs[0]["attempt"] == 1

    def test_zero_attempts_rejected(self):
        with pytest.raises(ValueError):
            retry_with_backoff(lambda: "ok", RetryPolicy(max_attempts=0))
