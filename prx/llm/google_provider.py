"""Google Gemini provider implementation."""

from typing import Optional

import httpx
from google import genai
from google.genai import types

import prx.config as _config
from prx.config import API_KEY_ENV_VARS, LLMProvider
from prx.llm.base import SYSTEM_PROMPT, BaseLLMProvider, LLMResult
from prx.llm.exceptions import LLMError, LLMTimeoutError

# Models with built-in "thinking", which consumes output tokens
THINKING_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash-thinking",
]

# Multiplier for max_output_tokens on thinking models
THINKING_TOKEN_MULTIPLIER = 3


class GoogleProvider(BaseLLMProvider):
    """Google Gemini LLM provider."""

    provider_name = "Google"

    def __init__(self, model: Optional[str] = None):
        super().__init__(model)
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.GOOGLE]

    def get_api_key(self) -> str:
        """Get the Google API key from environment or credentials file.

        Raises:
            MissingAPIKeyError: If GOOGLE_API_KEY is not found.
        """
        return self._get_api_key_with_fallback(self.api_key_env_var, self.provider_name)

    def _is_thinking_model(self) -> bool:
        return any(thinking_model in self.model.lower() for thinking_model in THINKING_MODELS)

    def summarize(self, diff: str, pr_body: str, timeout: Optional[float] = None) -> LLMResult:
        """Summarize the pull request changes using Google Gemini."""
        api_key = self.get_api_key()

        # HttpOptions takes the timeout in milliseconds
        client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(self._timeout(timeout) * 1000)),
        )

        full_prompt = f"{SYSTEM_PROMPT}\n\n{self.build_user_prompt(diff, pr_body)}"

        max_tokens = _config.MAX_TOKENS
        if self._is_thinking_model():
            max_tokens = _config.MAX_TOKENS * THINKING_TOKEN_MULTIPLIER

        try:
            response = client.models.generate_content(
                model=self.model,
                contents=full_prompt,
                config=types.GenerateContentConfig(
                    max_output_tokens=max_tokens,
                    temperature=_config.TEMPERATURE,
                ),
            )
        except httpx.TimeoutException as e:
            raise LLMTimeoutError("Google Gemini API call timed out") from e
        except Exception as e:
            raise LLMError(f"Google Gemini API call failed: {e}") from e

        if not response.candidates:
            raise LLMError("Google Gemini returned no candidates in response")

        finish_reason = str(getattr(response.candidates[0], "finish_reason", ""))
        if "SAFETY" in finish_reason:
            raise LLMError(f"Google Gemini blocked response due to safety filters: {finish_reason}")

        text = response.text or ""
        if not text.strip():
            raise LLMError("Google Gemini returned empty response")

        usage = response.usage_metadata
        return LLMResult(
            summary=text,
            model=self.model,
            input_tokens=(usage.prompt_token_count or 0) if usage else 0,
            output_tokens=(usage.candidates_token_count or 0) if usage else 0,
        )
