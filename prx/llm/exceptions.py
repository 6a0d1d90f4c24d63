"""LLM-related exception classes.

Contains all exception classes for LLM operations:
- LLMError: Base exception for LLM-related errors
- MissingAPIKeyError: Raised when API key is not set
- LLMTimeoutError: Raised when the provider doesn't answer in time
"""

from prx.exceptions import PrxError


class LLMError(PrxError):
    """Base exception for LLM-related errors."""

    pass


class MissingAPIKeyError(LLMError):
    """Raised when the required API key is not set."""

    pass


class LLMTimeoutError(LLMError):
    """Raised when the provider doesn't answer within the timeout."""

    pass
