"""Utility modules."""
from .logger import get_logger, set_user_context, set_log_level
from .exceptions import (
    SpendTrailError,
    ConfigError,
    PDFError,
    StatementError,
    LLMError,
    ValidationError,
    MalformedInputError,
    PreferenceError,
    RetryableError,
    RetryableLLMError
)
from .retry import RetryPolicy, retry_with_backoff

__all__ = [
    "get_logger",
    "set_user_context",
    "set_log_level",
    "SpendTrailError",
    "ConfigError",
    "PDFError",
    "StatementError",
    "LLMError",
    "ValidationError",
    "MalformedInputError",
    "PreferenceError",
    "RetryableError",
    "RetryableLLMError",
    "RetryPolicy",
    "retry_with_backoff"
]
