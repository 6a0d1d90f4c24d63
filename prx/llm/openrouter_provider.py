"""OpenRouter provider implementation.

OpenRouter provides unified access to many models through a single API.
It uses an OpenAI-compatible API format.
"""

from typing import Optional

from openai import OpenAI

from prx.config import API_KEY_ENV_VARS, LLMProvider
from prx.llm.openai_provider import OpenAIProvider

# OpenRouter API base URL
OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(OpenAIProvider):
    """OpenRouter LLM provider (OpenAI-compatible API)."""

    provider_name = "OpenRouter"

    def __init__(self, model: Optional[str] = None):
        """Initialize the OpenRouter provider.

        Args:
            model: The model to use, as provider/model-name (e.g. openai/gpt-4o).
        """
        super().__init__(model)
        self.api_key_env_var = API_KEY_ENV_VARS[LLMProvider.OPENROUTER]

    def _create_client(self, api_key: str, timeout: float) -> OpenAI:
        return OpenAI(api_key=api_key, base_url=OPENROUTER_BASE_URL, timeout=timeout, max_retries=0)

    def _extra_request_kwargs(self) -> dict:
        return {
            "extra_headers": {
                "HTTP-Referer": "https://github.com/ilaif/gh-prx",
                "X-Title": "gh-prx",
            },
        }
