"""Base classes and shared utilities for LLM providers."""

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from prx import config as _config
from prx.llm.exceptions import MissingAPIKeyError

logger = logging.getLogger(__name__)


@dataclass
class LLMResult:
    """Result from an LLM summary call, including token usage."""

    summary: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


# System prompt for the LLM (shared across all providers)
SYSTEM_PROMPT = (
    "You are a code reviewer. You are summarizing a pull request according to the code changes. "
    "You like making descriptions short and to the point."
)

USER_PROMPT_TEMPLATE = """Please summarize the pull request changes.

The git diff output for the PR:
'''
{diff}
'''

Structure your answer to conform with the following template:
'''
{pr_body}
'''

Please follow these guidelines:
- Do not repeat the commit summaries or the file summaries.
- Mention the file names that were changed, if applicable.
- Prefer bullet points over long sentences.
"""


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers."""

    provider_name: str = ""

    def __init__(self, model: Optional[str] = None):
        self.model = model or _config.ACTIVE_MODEL

    @abstractmethod
    def summarize(self, diff: str, pr_body: str, timeout: Optional[float] = None) -> LLMResult:
        """Summarize the changes of a pull request.

        Args:
            diff: The git diff (or commit list) of the pull request.
            pr_body: The pull request body template the summary should follow.
            timeout: Seconds to wait for the provider. Defaults to the configured timeout.

        Returns:
            An LLMResult containing the summary and token usage.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            LLMTimeoutError: If the provider doesn't answer in time.
            LLMError: For other LLM-related errors.
        """
        pass

    @abstractmethod
    def get_api_key(self) -> str:
        """Get the API key from environment or credentials file.

        Checks in order:
        1. Environment variable
        2. Repo-level .env file (if loaded)
        3. ~/.config/gh-prx/credentials file

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        pass

    def has_api_key(self) -> bool:
        """Return True if an API key is configured for this provider."""
        try:
            self.get_api_key()
        except MissingAPIKeyError:
            return False
        return True

    def _get_api_key_with_fallback(self, env_var_name: str, provider_name: str) -> str:
        """Helper to get API key with fallback to credentials file.

        Args:
            env_var_name: Environment variable name to check.
            provider_name: Human-readable provider name for error messages.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        # First check environment variable
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key

        # Then check credentials file
        from prx.global_config import get_credential

        api_key = get_credential(env_var_name)
        if api_key:
            return api_key

        raise MissingAPIKeyError(
            f"{provider_name} API key not found. Set it using:\n"
            f"  1. Environment variable: export {env_var_name}=your_key_here\n"
            f"  2. Run: prx config set-key {provider_name.lower()}\n"
            f"  3. Manually add to ~/.config/gh-prx/credentials"
        )

    def build_user_prompt(self, diff: str, pr_body: str) -> str:
        """Build the user prompt.

        Args:
            diff: The changes to summarize.
            pr_body: The pull request body template.

        Returns:
            The formatted user prompt.
        """
        prompt = USER_PROMPT_TEMPLATE.format(diff=diff, pr_body=pr_body)
        logger.debug("Creating an AI-powered summary based on prompt:\n%s", prompt)
        return prompt

    def _timeout(self, timeout: Optional[float]) -> float:
        return _config.TIMEOUT if timeout is None else timeout
