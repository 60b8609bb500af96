"""Custom exception classes for SpendTrail."""


class SpendTrailError(Exception):
    """Base exception for SpendTrail."""
    pass


class ConfigError(SpendTrailError):
    """Configuration-related errors."""
    pass


class PDFError(SpendTrailError):
    """PDF extraction errors."""
    pass


class StatementError(SpendTrailError):
    """Statement file cannot be read."""
    pass


class LLMError(SpendTrailError):
    """LLM processing errors."""
    pass


class ValidationError(SpendTrailError):
    """Data validation errors."""
    pass


class MalformedInputError(ValidationError, TypeError):
    """Statement text is missing or not a string."""
    pass


class PreferenceError(SpendTrailError):
    """User preference storage errors."""
    pass


# Retryable errors
class RetryableError(SpendTrailError):
    """Base class for errors that should trigger retry."""
    pass


class RetryableLLMError(RetryableError, LLMError):
    """LLM errors that can be retried."""
    pass
