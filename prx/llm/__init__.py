"""LLM provider module for prx.

This module provides a unified interface to the LLM providers used for
AI-powered pull request summaries. The active provider is configured in
the ``ai`` section of ~/.config/gh-prx/config.yaml.
"""

from typing import Optional

from dotenv import load_dotenv

import prx.config as _config
from prx.config import LLMProvider
from prx.llm.base import (
    BaseLLMProvider,
    LLMResult,
)
from prx.llm.exceptions import (
    LLMError,
    LLMTimeoutError,
    MissingAPIKeyError,
)

# Load environment variables from .env file
load_dotenv()


def get_provider(
    provider: Optional[LLMProvider] = None,
    model: Optional[str] = None,
) -> BaseLLMProvider:
    """Get an LLM provider instance.

    Args:
        provider: The provider to use. Defaults to ACTIVE_PROVIDER from config.
        model: The model to use. Defaults to ACTIVE_MODEL from config.

    Returns:
        An instance of the appropriate LLM provider.

    Raises:
        LLMError: If the provider is not supported.
    """
    provider = provider or _config.ACTIVE_PROVIDER
    model = model or _config.ACTIVE_MODEL

    if provider == LLMProvider.OPENAI:
        from prx.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=model)

    elif provider == LLMProvider.ANTHROPIC:
        from prx.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=model)

    elif provider == LLMProvider.GOOGLE:
        from prx.llm.google_provider import GoogleProvider

        return GoogleProvider(model=model)

    elif provider == LLMProvider.OPENROUTER:
        from prx.llm.openrouter_provider import OpenRouterProvider

        return OpenRouterProvider(model=model)

    else:
        raise LLMError(f"Unsupported provider: {provider}")


def summarize_changes(diff: str, pr_body: str, timeout: Optional[float] = None) -> LLMResult:
    """Summarize pull request changes with the configured provider.

    Args:
        diff: The changes to summarize.
        pr_body: The pull request body template the summary should follow.
        timeout: Seconds to wait for the provider.

    Returns:
        An LLMResult containing the summary and token usage.

    Raises:
        MissingAPIKeyError: If the API key is not set.
        LLMTimeoutError: If the provider doesn't answer in time.
        LLMError: For other LLM-related errors.
    """
    provider = get_provider()
    return provider.summarize(diff, pr_body, timeout=timeout)


__all__ = [
    "BaseLLMProvider",
    "LLMError",
    "LLMTimeoutError",
    "MissingAPIKeyError",
    "LLMResult",
    "get_provider",
    "summarize_changes",
]
