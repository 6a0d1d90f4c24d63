"""OpenAI GPT provider implementation."""

from typing import Optional

from openai import APITimeoutError, OpenAI

import prx.config as _config
from prx.config import API_KEY_ENV_VARS, LLMProvider
from prx.llm.base import SYSTEM_PROMPT, BaseLLMProvider, LLMResult
from prx.llm.exceptions import LLMError, LLMTimeoutError


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT LLM provider."""

    provider_name = "OpenAI"

    def __init__(self, model: Optional[str] = None):
        """Initialize the OpenAI provider.

        Args:
            model: The model to use. Defaults to ACTIVE_MODEL from config.
        """
        super().__init__(model)
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.OPENAI]

    def get_api_key(self) -> str:
        """Get the OpenAI API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If OPENAI_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, self.provider_name)

    def _create_client(self, api_key: str, timeout: float) -> OpenAI:
        return OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def _extra_request_kwargs(self) -> dict:
        return {}

    def summarize(self, diff: str, pr_body: str, timeout: Optional[float] = None) -> LLMResult:
        """Summarize the pull request changes using an OpenAI-compatible API."""
        api_key = self.get_api_key()
        client = self._create_client(api_key, self._timeout(timeout))

        user_prompt = self.build_user_prompt(diff, pr_body)

        try:
            response = client.chat.completions.create(
                model=self.model,
                max_tokens=_config.MAX_TOKENS,
                temperature=_config.TEMPERATURE,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                **self._extra_request_kwargs(),
            )
        except APITimeoutError as e:
            raise LLMTimeoutError(f"{self.provider_name} API call timed out") from e
        except Exception as e:
            raise LLMError(f"{self.provider_name} API call failed: {e}") from e

        if not response.choices:
            raise LLMError(f"{self.provider_name} returned no choices in response")

        return LLMResult(
            summary=response.choices[0].message.content or "",
            model=self.model,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
        )
