"""Tests for prx.global_config module."""

import stat
from pathlib import Path

import pytest
import yaml

from prx.config import LLMProvider
from prx.exceptions import ConfigError
from prx.global_config import (
    GlobalConfigError,
    JiraSettings,
    LinearSettings,
    ensure_global_config_dir,
    get_active_model,
    get_active_provider,
    get_config_file_path,
    get_credential,
    get_credentials_file_path,
    get_editor_preference,
    get_global_config_dir,
    get_global_repository_config,
    get_jira_settings,
    get_linear_settings,
    get_timeout,
    load_credentials,
    load_global_config,
    save_credential,
    save_global_config,
    save_provider_settings,
    set_provider_and_model,
)


@pytest.fixture
def config_dir(temp_dir, mocker):
    """Point the global config directory at a temporary directory."""
    mock_dir = temp_dir / "gh-prx"
    mocker.patch("prx.global_config._CONFIG_DIR", mock_dir)
    return mock_dir


def write_config(config_dir: Path, config: dict) -> None:
    config_dir.mkdir(parents=True, exist_ok=True)
    with open(config_dir / "config.yaml", "w") as f:
        yaml.dump(config, f)


class TestGlobalConfigDir:
    """Tests for global config directory functions."""

    def test_get_global_config_dir_returns_path(self):
        """Test that get_global_config_dir returns a Path."""
        result = get_global_config_dir()
        assert isinstance(result, Path)
        assert str(result).endswith("gh-prx")

    def test_ensure_global_config_dir_creates_directory(self, config_dir):
        """Test that ensure_global_config_dir creates the directory."""
        result = ensure_global_config_dir()

        assert config_dir.exists()
        assert result == config_dir

    def test_file_paths(self, config_dir):
        """Test the config and credentials file names."""
        assert get_config_file_path() == config_dir / "config.yaml"
        assert get_credentials_file_path() == config_dir / "credentials"


class TestLoadSaveGlobalConfig:
    """Tests for load_global_config and save_global_config."""

    def test_missing_file_returns_empty(self, config_dir):
        """Test that a missing file is an empty config."""
        assert load_global_config() == {}

    def test_save_then_load(self, config_dir):
        """Test that a saved config is loaded back."""
        save_global_config({"editor": "vim", "ai": {"provider": "anthropic"}})

        assert load_global_config() == {"editor": "vim", "ai": {"provider": "anthropic"}}

    def test_invalid_yaml_raises(self, config_dir):
        """Test that unparsable YAML raises GlobalConfigError."""
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("ai: [unclosed")

        with pytest.raises(GlobalConfigError):
            load_global_config()

    def test_non_mapping_raises(self, config_dir):
        """Test that a YAML list is rejected."""
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("- a\n- b\n")

        with pytest.raises(GlobalConfigError) as exc_info:
            load_global_config()

        assert "expected a mapping" in str(exc_info.value)


class TestCredentials:
    """Tests for the credentials file."""

    def test_missing_file(self, config_dir):
        """Test that missing credentials are empty."""
        assert load_credentials() == {}
        assert get_credential("OPENAI_API_KEY") is None

    def test_save_credential(self, config_dir):
        """Test saving and reading a credential."""
        save_credential("OPENAI_API_KEY", "sk-test")
        save_credential("ANTHROPIC_API_KEY", "sk-ant")

        assert get_credential("OPENAI_API_KEY") == "sk-test"
        assert load_credentials() == {"OPENAI_API_KEY": "sk-test", "ANTHROPIC_API_KEY": "sk-ant"}

    def test_credentials_file_is_private(self, config_dir):
        """Test that the credentials file is readable by the owner only."""
        save_credential("OPENAI_API_KEY", "sk-test")

        mode = get_credentials_file_path().stat().st_mode
        assert stat.S_IMODE(mode) == stat.S_IRUSR | stat.S_IWUSR

    def test_comments_are_skipped(self, config_dir):
        """Test that comments and blank lines are ignored."""
        config_dir.mkdir()
        (config_dir / "credentials").write_text("# header\n\nKEY = value=with=equals\n")

        assert load_credentials() == {"KEY": "value=with=equals"}


class TestAISettings:
    """Tests for the ai section."""

    def test_active_provider_and_model(self, config_dir):
        """Test reading the configured provider and model."""
        set_provider_and_model(LLMProvider.ANTHROPIC, "claude-3-5-haiku-latest")

        assert get_active_provider() == LLMProvider.ANTHROPIC
        assert get_active_model() == "claude-3-5-haiku-latest"

    def test_unknown_provider_is_ignored(self, config_dir):
        """Test that an unknown provider name is ignored."""
        write_config(config_dir, {"ai": {"provider": "nope"}})

        assert get_active_provider() is None

    def test_unset_values(self, config_dir):
        """Test that unset values are None."""
        assert get_active_provider() is None
        assert get_timeout() is None
        assert get_editor_preference() is None

    def test_timeout(self, config_dir):
        """Test reading the summary timeout."""
        write_config(config_dir, {"ai": {"timeout": 5}})

        assert get_timeout() == 5


class TestGlobalRepositoryConfig:
    """Tests for get_global_repository_config function."""

    def test_returns_global_section(self, config_dir):
        """Test that the global section is returned."""
        write_config(config_dir, {"global": {"branch": {"max_length": 30}}})

        assert get_global_repository_config() == {"branch": {"max_length": 30}}

    def test_missing_section(self, config_dir):
        """Test that a missing section is empty."""
        assert get_global_repository_config() == {}

    def test_non_mapping_section(self, config_dir):
        """Test that a non-mapping section raises."""
        write_config(config_dir, {"global": "nope"})

        with pytest.raises(GlobalConfigError):
            get_global_repository_config()


class TestProviderSettings:
    """Tests for issue provider settings."""

    @pytest.fixture(autouse=True)
    def clear_env(self, monkeypatch):
        for name in ("JIRA_ENDPOINT", "JIRA_USER", "JIRA_TOKEN", "LINEAR_API_KEY"):
            monkeypatch.delenv(name, raising=False)

    def test_save_and_load_jira_settings(self, config_dir):
        """Test that saved Jira settings are loaded back."""
        save_provider_settings("jira", {"endpoint": "https://x.atlassian.net", "user": "me", "token": "t"})

        settings = get_jira_settings()
        assert settings == JiraSettings(endpoint="https://x.atlassian.net", user="me", token="t")

    def test_empty_values_are_not_saved(self, config_dir):
        """Test that empty values keep the stored ones."""
        save_provider_settings("jira", {"endpoint": "https://x", "user": "me", "token": "t"})
        save_provider_settings("jira", {"endpoint": "", "user": "you", "token": ""})

        settings = get_jira_settings()
        assert settings.endpoint == "https://x"
        assert settings.user == "you"

    def test_jira_environment_fallback(self, config_dir, monkeypatch):
        """Test that unset Jira settings come from the environment."""
        monkeypatch.setenv("JIRA_TOKEN", "env-token")

        assert get_jira_settings().token == "env-token"

    def test_jira_validate_lists_missing(self, config_dir):
        """Test that validation names every missing setting."""
        with pytest.raises(ConfigError) as exc_info:
            JiraSettings(endpoint="https://x").validate()

        message = str(exc_info.value)
        assert "prx setup provider jira" in message
        assert "user is missing" in message
        assert "token is missing" in message
        assert "endpoint" not in message.split(":", 1)[1]

    def test_linear_settings(self, config_dir, monkeypatch):
        """Test Linear settings from config and environment."""
        assert get_linear_settings().api_key == ""
        with pytest.raises(ConfigError):
            LinearSettings().validate()

        monkeypatch.setenv("LINEAR_API_KEY", "lin_api")
        assert get_linear_settings().api_key == "lin_api"
