"""Tests for the retry policy."""
import unittest
from unittest.mock import patch

from spendtrail.utils import LLMError, RetryableLLMError, RetryPolicy, retry_with_backoff


class FlakyCall:
    """Raises the queued errors, then returns 'ok'."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


class TestRetryPolicy(unittest.TestCase):
    """Test RetryPolicy values."""

    def test_wait_time_is_capped(self):
        """Test exponential waits and the cap."""
        policy = RetryPolicy(max_attempts=6, backoff_factor=2.0, max_backoff=5.0)
        self.assertEqual([policy.wait_time(n) for n in range(4)], [1.0, 2.0, 4.0, 5.0])

    def test_invalid_attempts(self):
        """Test that at least one attempt is required."""
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_invalid_backoff(self):
        """Test backoff bounds."""
        with self.assertRaises(ValueError):
            RetryPolicy(backoff_factor=0)
        with self.assertRaises(ValueError):
            RetryPolicy(max_backoff=-1)


@patch("spendtrail.utils.retry.time.sleep")
class TestRetryWithBackoff(unittest.TestCase):
    """Test retry_with_backoff decorator."""

    def test_recovers_after_transient_errors(self, mock_sleep):
        """Test success on the last allowed attempt."""
        call = FlakyCall(RetryableLLMError("503"), RetryableLLMError("503"))
        wrapped = retry_with_backoff(RetryPolicy(max_attempts=3, backoff_factor=3.0))(call)

        self.assertEqual(wrapped(), "ok")
        self.assertEqual(call.calls, 3)
        self.assertEqual([c.args[0] for c in mock_sleep.call_args_list], [1.0, 3.0])

    def test_gives_up_after_max_attempts(self, mock_sleep):
        """Test that the last error is re-raised."""
        call = FlakyCall(*[RetryableLLMError(str(n)) for n in range(5)])
        wrapped = retry_with_backoff(RetryPolicy(max_attempts=2), operation="Gemini request")(call)

        with self.assertRaises(RetryableLLMError) as ctx:
            wrapped()

        self.assertEqual(str(ctx.exception), "1")
        self.assertEqual(call.calls, 2)
        self.assertEqual(mock_sleep.call_count, 1)

    def test_non_retryable_error_propagates(self, mock_sleep):
        """Test that errors outside retry_on are not retried."""
        call = FlakyCall(LLMError("bad schema"))
        wrapped = retry_with_backoff(RetryPolicy(retry_on=(RetryableLLMError,)))(call)

        with self.assertRaises(LLMError):
            wrapped()

        self.assertEqual(call.calls, 1)
        mock_sleep.assert_not_called()

    def test_single_attempt(self, mock_sleep):
        """Test a policy that never retries."""
        call = FlakyCall(RetryableLLMError("503"))
        wrapped = retry_with_backoff(RetryPolicy(max_attempts=1))(call)

        with self.assertRaises(RetryableLLMError):
            wrapped()

        self.assertEqual(call.calls, 1)
        mock_sleep.assert_not_called()


if __name__ == "__main__":
    unittest.main()
