"""Configuration for the AI summary providers.

Configuration is loaded from the ``ai`` section of ~/.config/gh-prx/config.yaml
Use 'prx config' commands to modify settings.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class LLMProvider(Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    OPENROUTER = "openrouter"


# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================
# These are used only if the ai section of the setup config is missing

DEFAULT_PROVIDER = LLMProvider.OPENAI
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.3
DEFAULT_TIMEOUT = 10.0


# ============================================================
# ACTIVE CONFIGURATION (loaded from global config)
# ============================================================

# Initially set to defaults - will be overridden by load_config()
ACTIVE_PROVIDER = DEFAULT_PROVIDER
ACTIVE_MODEL = DEFAULT_MODEL
MAX_TOKENS = DEFAULT_MAX_TOKENS
TEMPERATURE = DEFAULT_TEMPERATURE
TIMEOUT = DEFAULT_TIMEOUT


def load_config() -> None:
    """Load the AI settings from the global config file.

    This should be called by the CLI before using the LLM.
    """
    global ACTIVE_PROVIDER, ACTIVE_MODEL, MAX_TOKENS, TEMPERATURE, TIMEOUT

    # Import here to avoid circular dependency
    from prx import global_config

    try:
        provider = global_config.get_active_provider()
        model = global_config.get_active_model()
        max_tokens = global_config.get_max_tokens()
        temperature = global_config.get_temperature()
        timeout = global_config.get_timeout()
    except global_config.GlobalConfigError as e:
        logger.warning("Using default AI settings: %s", e)
        return

    if provider:
        ACTIVE_PROVIDER = provider
        # A model picked for another provider doesn't carry over
        ACTIVE_MODEL = model or DEFAULT_MODELS[provider]
    elif model:
        ACTIVE_MODEL = model
    if max_tokens is not None:
        MAX_TOKENS = max_tokens
    if temperature is not None:
        TEMPERATURE = temperature
    if timeout is not None:
        TIMEOUT = timeout


# ============================================================
# AVAILABLE MODELS PER PROVIDER
# ============================================================

AVAILABLE_MODELS = {
    LLMProvider.OPENAI: [
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "gpt-3.5-turbo",
    ],
    LLMProvider.ANTHROPIC: [
        "claude-sonnet-4-20250514",
        "claude-3-5-sonnet-latest",
        "claude-3-5-haiku-latest",
    ],
    LLMProvider.GOOGLE: [
        "gemini-2.5-flash",
        "gemini-2.5-flash-lite",
        "gemini-2.5-pro",
        "gemini-2.0-flash",
    ],
    LLMProvider.OPENROUTER: [
        "openai/gpt-4o-mini",
        "openai/gpt-4o",
        "anthropic/claude-sonnet-4",
        "google/gemini-2.0-flash-exp",
        "meta-llama/llama-3.3-70b-instruct",
        "deepseek/deepseek-chat",
    ],
}

DEFAULT_MODELS = {provider: models[0] for provider, models in AVAILABLE_MODELS.items()}

# ============================================================
# API KEY ENVIRONMENT VARIABLES
# ============================================================

API_KEY_ENV_VARS = {
    LLMProvider.OPENAI: "OPENAI_API_KEY",
    LLMProvider.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProvider.GOOGLE: "GOOGLE_API_KEY",
    LLMProvider.OPENROUTER: "OPENROUTER_API_KEY",
}


def get_api_key_env_var(provider: LLMProvider) -> str:
    """Get the environment variable name for the API key.

    Args:
        provider: The LLM provider.

    Returns:
        The environment variable name.
    """
    return API_KEY_ENV_VARS[provider]
