"""Global configuration management for prx.

Handles user-level configuration stored in ~/.config/gh-prx/:
- config.yaml: Issue provider credentials, AI settings, editor and the
  global repository configuration
- credentials: API keys for LLM providers
"""

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from prx.config import LLMProvider
from prx.exceptions import ConfigError

logger = logging.getLogger(__name__)


class GlobalConfigError(ConfigError):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".config" / "gh-prx"


def get_global_config_dir() -> Path:
    """Get the global prx configuration directory.

    Returns:
        Path to ~/.config/gh-prx/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to ~/.config/gh-prx/
    """
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    """Get path to config.yaml file.

    Returns:
        Path to ~/.config/gh-prx/config.yaml
    """
    return get_global_config_dir() / "config.yaml"


def get_credentials_file_path() -> Path:
    """Get path to credentials file.

    Returns:
        Path to ~/.config/gh-prx/credentials
    """
    return get_global_config_dir() / "credentials"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.config/gh-prx/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    logger.debug("Loading setup config from %s", config_file)
    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Failed to load config from {config_file}: expected a mapping")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.config/gh-prx/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    logger.info("Saving config to %s", config_file)
    try:
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}") from e


def _parse_credentials(path: Path) -> Dict[str, str]:
    credentials = {}
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comments
            if not line or line.startswith("#"):
                continue

            # Parse KEY=value format
            if "=" in line:
                key, value = line.split("=", 1)
                credentials[key.strip()] = value.strip()
    return credentials


def load_credentials() -> Dict[str, str]:
    """Load API keys from ~/.config/gh-prx/credentials.

    Returns:
        Dictionary mapping environment variable names to API keys.
    """
    credentials_file = get_credentials_file_path()

    if not credentials_file.exists():
        return {}

    try:
        return _parse_credentials(credentials_file)
    except OSError as e:
        raise GlobalConfigError(f"Failed to load credentials from {credentials_file}: {e}") from e


def save_credential(provider_key: str, api_key: str) -> None:
    """Save or update an API key in the credentials file.

    Args:
        provider_key: Environment variable name (e.g., "OPENAI_API_KEY")
        api_key: The API key value.
    """
    ensure_global_config_dir()
    credentials_file = get_credentials_file_path()

    existing_creds = load_credentials()
    existing_creds[provider_key] = api_key

    try:
        with open(credentials_file, "w") as f:
            f.write("# gh-prx API credentials\n")
            f.write("# This file stores API keys for LLM providers\n")
            f.write("# Format: PROVIDER_API_KEY=your_key_here\n\n")

            for key, value in existing_creds.items():
                f.write(f"{key}={value}\n")

        # Owner read/write only
        os.chmod(credentials_file, stat.S_IRUSR | stat.S_IWUSR)
    except OSError as e:
        raise GlobalConfigError(f"Failed to save credential: {e}") from e


def get_credential(provider_key: str) -> Optional[str]:
    """Get an API key from credentials file.

    Args:
        provider_key: Environment variable name (e.g., "OPENAI_API_KEY")

    Returns:
        The API key if found, None otherwise.
    """
    credentials = load_credentials()
    return credentials.get(provider_key)


def _ai_section(config: Dict[str, Any]) -> Dict[str, Any]:
    return config.get("ai") or {}


def get_active_provider() -> Optional[LLMProvider]:
    """Get the active LLM provider from global config.

    Returns:
        LLMProvider enum value, or None if not configured.
    """
    provider_str = _ai_section(load_global_config()).get("provider")

    if not provider_str:
        return None

    try:
        return LLMProvider(provider_str)
    except ValueError:
        logger.warning("Ignoring unknown AI provider '%s' in setup config", provider_str)
        return None


def get_active_model() -> Optional[str]:
    """Get the active model from global config."""
    return _ai_section(load_global_config()).get("model")


def get_max_tokens() -> Optional[int]:
    """Get max_tokens setting from global config."""
    return _ai_section(load_global_config()).get("max_tokens")


def get_temperature() -> Optional[float]:
    """Get temperature setting from global config."""
    return _ai_section(load_global_config()).get("temperature")


def get_timeout() -> Optional[float]:
    """Get the AI summary timeout (seconds) from global config."""
    return _ai_section(load_global_config()).get("timeout")


def set_provider_and_model(provider: LLMProvider, model: str) -> None:
    """Set the active provider and model in global config.

    Args:
        provider: The LLM provider to use.
        model: The model name to use.
    """
    config = load_global_config()
    ai = config.setdefault("ai", {})
    ai["provider"] = provider.value
    ai["model"] = model
    save_global_config(config)


def get_editor_preference() -> Optional[str]:
    """Get the user's preferred editor from global config.

    Returns:
        Editor command string, or None if not set.
    """
    return load_global_config().get("editor")


def get_global_repository_config() -> Dict[str, Any]:
    """Get the repository configuration shared by all repositories.

    Returns:
        The ``global`` section of the setup config, or an empty dict.
    """
    section = load_global_config().get("global") or {}
    if not isinstance(section, dict):
        raise GlobalConfigError("global: Expected a mapping")
    return section


# ============================================================
# ISSUE PROVIDER SETTINGS
# ============================================================


@dataclass
class JiraSettings:
    """Connection settings for Jira."""

    endpoint: str = ""
    user: str = ""
    token: str = ""

    def __post_init__(self):
        self.endpoint = self.endpoint or os.getenv("JIRA_ENDPOINT", "")
        self.user = self.user or os.getenv("JIRA_USER", "")
        self.token = self.token or os.getenv("JIRA_TOKEN", "")

    def validate(self) -> None:
        """Raise ConfigError listing every missing setting."""
        problems = []
        if not self.endpoint:
            problems.append("Jira endpoint is missing")
        if not self.user:
            problems.append("Jira user is missing")
        if not self.token:
            problems.append("Jira token is missing")
        if problems:
            raise ConfigError(
                "Invalid Jira config, please run 'prx setup provider jira': " + "; ".join(problems)
            )


@dataclass
class LinearSettings:
    """Connection settings for Linear."""

    api_key: str = ""

    def __post_init__(self):
        self.api_key = self.api_key or os.getenv("LINEAR_API_KEY", "")

    def validate(self) -> None:
        """Raise ConfigError if the API key is missing."""
        if not self.api_key:
            raise ConfigError(
                "Invalid Linear config, please run 'prx setup provider linear': "
                "Linear API key is missing"
            )


def get_jira_settings() -> JiraSettings:
    """Get Jira settings from global config, falling back to the environment."""
    section = load_global_config().get("jira") or {}
    return JiraSettings(
        endpoint=section.get("endpoint") or "",
        user=section.get("user") or "",
        token=section.get("token") or "",
    )


def get_linear_settings() -> LinearSettings:
    """Get Linear settings from global config, falling back to the environment."""
    section = load_global_config().get("linear") or {}
    return LinearSettings(api_key=section.get("api_key") or "")


def save_provider_settings(provider: str, settings: Dict[str, str]) -> None:
    """Store issue provider settings in the global config.

    Args:
        provider: Provider name (jira or linear).
        settings: Values to store; empty values are not written.
    """
    config = load_global_config()
    section = config.setdefault(provider, {}) or {}
    section.update({key: value for key, value in settings.items() if value})
    config[provider] = section
    save_global_config(config)


def is_configured() -> bool:
    """Check if prx has a setup config file.

    Returns:
        True if config.yaml exists, False otherwise.
    """
    return get_config_file_path().exists()
