"""Tests for prx.llm package and prx.config module."""

from unittest.mock import MagicMock

import httpx
import pytest
from openai import APITimeoutError

import prx.config as _config
from prx.config import DEFAULT_MODELS, LLMProvider, get_api_key_env_var, load_config
from prx.llm import LLMError, LLMTimeoutError, MissingAPIKeyError, get_provider
from prx.llm.anthropic_provider import AnthropicProvider
from prx.llm.base import USER_PROMPT_TEMPLATE
from prx.llm.google_provider import GoogleProvider
from prx.llm.openai_provider import OpenAIProvider
from prx.llm.openrouter_provider import OPENROUTER_BASE_URL, OpenRouterProvider


@pytest.fixture
def openai_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")


def chat_response(content: str) -> MagicMock:
    response = MagicMock()
    response.choices = [MagicMock(message=MagicMock(content=content))]
    response.usage = MagicMock(prompt_tokens=120, completion_tokens=30)
    return response


class TestGetProvider:
    """Tests for get_provider factory function."""

    @pytest.mark.parametrize("provider,cls", [
        (LLMProvider.OPENAI, OpenAIProvider),
        (LLMProvider.ANTHROPIC, AnthropicProvider),
        (LLMProvider.GOOGLE, GoogleProvider),
        (LLMProvider.OPENROUTER, OpenRouterProvider),
    ])
    def test_returns_provider(self, provider, cls):
        """Test getting each provider."""
        assert isinstance(get_provider(provider), cls)

    def test_custom_model(self):
        """Test provider with custom model."""
        provider = get_provider(LLMProvider.OPENAI, model="gpt-4.1")
        assert provider.model == "gpt-4.1"

    def test_unsupported_provider_raises_error(self):
        """Test that unsupported provider raises LLMError."""
        with pytest.raises(LLMError) as exc_info:
            get_provider("invalid_provider")
        assert "Unsupported provider" in str(exc_info.value)


class TestLoadConfig:
    """Tests for load_config function."""

    @pytest.fixture(autouse=True)
    def restore_config(self, monkeypatch):
        for name in ("ACTIVE_PROVIDER", "ACTIVE_MODEL", "MAX_TOKENS", "TEMPERATURE", "TIMEOUT"):
            monkeypatch.setattr(_config, name, getattr(_config, name))

    def test_provider_without_model_uses_provider_default(self, mocker):
        """Test that picking a provider picks its default model."""
        mocker.patch("prx.global_config.get_active_provider", return_value=LLMProvider.ANTHROPIC)
        mocker.patch("prx.global_config.get_active_model", return_value=None)
        mocker.patch("prx.global_config.get_max_tokens", return_value=None)
        mocker.patch("prx.global_config.get_temperature", return_value=None)
        mocker.patch("prx.global_config.get_timeout", return_value=3)

        load_config()

        assert _config.ACTIVE_PROVIDER == LLMProvider.ANTHROPIC
        assert _config.ACTIVE_MODEL == DEFAULT_MODELS[LLMProvider.ANTHROPIC]
        assert _config.TIMEOUT == 3

    def test_broken_global_config_keeps_defaults(self, mocker):
        """Test that an unreadable setup config is only a warning."""
        from prx.global_config import GlobalConfigError

        mocker.patch("prx.global_config.get_active_provider", side_effect=GlobalConfigError("bad"))

        load_config()

        assert _config.ACTIVE_PROVIDER == _config.DEFAULT_PROVIDER

    def test_api_key_env_vars(self):
        """Test the API key environment variable names."""
        assert get_api_key_env_var(LLMProvider.OPENROUTER) == "OPENROUTER_API_KEY"


class TestApiKeys:
    """Tests for API key lookup."""

    def test_from_environment(self, openai_key):
        """Test that the environment variable is used first."""
        assert OpenAIProvider().get_api_key() == "sk-test"

    def test_from_credentials_file(self, monkeypatch, mocker):
        """Test the credentials file fallback."""
        monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
        mocker.patch("prx.global_config.get_credential", return_value="sk-ant")

        assert AnthropicProvider().get_api_key() == "sk-ant"

    def test_missing_key(self, monkeypatch, mocker):
        """Test that a missing key raises MissingAPIKeyError."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        mocker.patch("prx.global_config.get_credential", return_value=None)
        provider = OpenAIProvider()

        with pytest.raises(MissingAPIKeyError) as exc_info:
            provider.get_api_key()

        assert "prx config set-key openai" in str(exc_info.value)
        assert provider.has_api_key() is False


class TestOpenAIProvider:
    """Tests for OpenAIProvider summaries."""

    def test_summarize(self, openai_key, mocker):
        """Test a successful summary."""
        mock_openai = mocker.patch("prx.llm.openai_provider.OpenAI")
        client = mock_openai.return_value
        client.chat.completions.create.return_value = chat_response("- Changed pr.py")

        result = OpenAIProvider(model="gpt-4o-mini").summarize("diff text", "## Body", timeout=4)

        assert result.summary == "- Changed pr.py"
        assert (result.input_tokens, result.output_tokens) == (120, 30)
        mock_openai.assert_called_once_with(api_key="sk-test", timeout=4, max_retries=0)
        messages = client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[1]["content"] == USER_PROMPT_TEMPLATE.format(diff="diff text", pr_body="## Body")

    def test_timeout(self, openai_key, mocker):
        """Test that a client timeout raises LLMTimeoutError."""
        mock_openai = mocker.patch("prx.llm.openai_provider.OpenAI")
        mock_openai.return_value.chat.completions.create.side_effect = APITimeoutError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))

        with pytest.raises(LLMTimeoutError):
            OpenAIProvider().summarize("diff", "body")

    def test_api_error(self, openai_key, mocker):
        """Test that other failures raise LLMError."""
        mock_openai = mocker.patch("prx.llm.openai_provider.OpenAI")
        mock_openai.return_value.chat.completions.create.side_effect = RuntimeError("rate limited")

        with pytest.raises(LLMError) as exc_info:
            OpenAIProvider().summarize("diff", "body")

        assert not isinstance(exc_info.value, LLMTimeoutError)
        assert "rate limited" in str(exc_info.value)

    def test_openrouter_base_url(self, monkeypatch, mocker):
        """Test that OpenRouter talks to its own endpoint."""
        monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or")
        mock_openai = mocker.patch("prx.llm.openrouter_provider.OpenAI")
        mock_openai.return_value.chat.completions.create.return_value = chat_response("ok")

        OpenRouterProvider(model="openai/gpt-4o").summarize("diff", "body", timeout=2)

        assert mock_openai.call_args.kwargs["base_url"] == OPENROUTER_BASE_URL
        assert "extra_headers" in mock_openai.return_value.chat.completions.create.call_args.kwargs


class TestAnthropicProvider:
    """Tests for AnthropicProvider summaries."""

    def test_joins_text_blocks(self, monkeypatch, mocker):
        """Test that the text blocks of the reply are joined."""
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")
        mock_anthropic = mocker.patch("prx.llm.anthropic_provider.Anthropic")
        message = MagicMock()
        message.content = [MagicMock(type="text", text="Part one. "), MagicMock(type="text", text="Part two.")]
        message.usage = MagicMock(input_tokens=50, output_tokens=10)
        mock_anthropic.return_value.messages.create.return_value = message

        result = AnthropicProvider(model="claude-3-5-haiku-latest").summarize("diff", "body")

        assert result.summary == "Part one. Part two."
        assert result.input_tokens == 50
