"""Anthropic Claude provider implementation."""

from typing import Optional

from anthropic import Anthropic, APITimeoutError

import prx.config as _config
from prx.config import API_KEY_ENV_VARS, LLMProvider
from prx.llm.base import SYSTEM_PROMPT, BaseLLMProvider, LLMResult
from prx.llm.exceptions import LLMError, LLMTimeoutError


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude LLM provider."""

    provider_name = "Anthropic"

    def __init__(self, model: Optional[str] = None):
        super().__init__(model)
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.ANTHROPIC]

    def get_api_key(self) -> str:
        """Get the Anthropic API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If ANTHROPIC_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, self.provider_name)

    def summarize(self, diff: str, pr_body: str, timeout: Optional[float] = None) -> LLMResult:
        """Summarize the pull request changes using Anthropic Claude."""
        api_key = self.get_api_key()
        client = Anthropic(api_key=api_key, timeout=self._timeout(timeout), max_retries=0)

        user_prompt = self.build_user_prompt(diff, pr_body)

        try:
            message = client.messages.create(
                model=self.model,
                max_tokens=_config.MAX_TOKENS,
                temperature=_config.TEMPERATURE,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except APITimeoutError as e:
            raise LLMTimeoutError("Anthropic API call timed out") from e
        except Exception as e:
            raise LLMError(f"Anthropic API call failed: {e}") from e

        text = "".join(block.text for block in message.content if getattr(block, "type", "") == "text")

        return LLMResult(
            summary=text,
            model=self.model,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
        )
