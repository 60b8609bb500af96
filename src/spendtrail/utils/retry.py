"""Retry policy for calls to external services."""
import time
import functools
from dataclasses import dataclass
from typing import Callable, Optional, Type, Tuple
from .exceptions import RetryableError
from .logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class RetryPolicy:
    """
    How often to retry a failing call and how long to wait in between.

    Attempt n (0-based) is followed by a wait of backoff_factor ** n seconds,
    capped at max_backoff.
    """
    max_attempts: int = 3
    backoff_factor: float = 2.0
    max_backoff: float = 30.0
    retry_on: Tuple[Type[Exception], ...] = (RetryableError,)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.backoff_factor <= 0 or self.max_backoff < 0:
            raise ValueError("backoff_factor must be positive and max_backoff non-negative")

    def wait_time(self, attempt: int) -> float:
        return min(self.backoff_factor ** attempt, self.max_backoff)


def retry_with_backoff(policy: Optional[RetryPolicy] = None, operation: Optional[str] = None):
    """
    Decorator retrying a call on the policy's retryable exceptions.

    Args:
        policy: Retry policy, defaults to RetryPolicy()
        operation: Label used in log messages, defaults to the function name

    The last exception is re-raised once attempts are exhausted; anything
    outside policy.retry_on propagates immediately.
    """
    policy = policy or RetryPolicy()

    def decorator(func: Callable):
        label = operation or getattr(func, "__name__", type(func).__name__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(policy.max_attempts):
                try:
                    return func(*args, **kwargs)
                except policy.retry_on as e:
                    if attempt == policy.max_attempts - 1:
                        logger.error(f"{label} failed after {policy.max_attempts} attempts: {e}")
                        raise

                    wait_time = policy.wait_time(attempt)
                    logger.warning(
                        f"{label} attempt {attempt + 1}/{policy.max_attempts} failed "
                        f"({type(e).__name__}: {e}), retrying in {wait_time:.1f}s"
                    )
                    time.sleep(wait_time)

        return wrapper
    return decorator
