"""CLI commands for the AI summary configuration."""

import typer

from prx import global_config
from prx.cli.utils import handle_errors
from prx.config import (
    API_KEY_ENV_VARS,
    AVAILABLE_MODELS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    LLMProvider,
)
from prx.exceptions import ConfigError

PROVIDER_NAMES = ", ".join(provider.value for provider in LLMProvider)

# Subcommand group for configuration management
config_app = typer.Typer(
    name="config",
    help="Manage the AI summary configuration in ~/.config/gh-prx/",
    add_completion=False,
)


def _parse_provider(provider: str) -> LLMProvider:
    try:
        return LLMProvider(provider.lower())
    except ValueError:
        raise ConfigError(f"Invalid provider: {provider}. Valid providers: {PROVIDER_NAMES}") from None


def _mask(api_key: str) -> str:
    return api_key[:8] + "..." + api_key[-4:] if len(api_key) > 12 else "***"


@config_app.command("show")
def config_show() -> None:
    """Show current global configuration."""
    with handle_errors():
        if not global_config.is_configured():
            typer.echo("No configuration found. Run 'prx config set-provider' to set up.")
            return

        config = global_config.load_global_config()
        ai = config.get("ai") or {}

        typer.echo("Current prx configuration (~/.config/gh-prx/config.yaml):")
        typer.echo()
        typer.echo(f"  AI Provider: {ai.get('provider', 'not set')}")
        typer.echo(f"  AI Model: {ai.get('model', 'not set')}")
        typer.echo(f"  Max Tokens: {ai.get('max_tokens', DEFAULT_MAX_TOKENS)}")
        typer.echo(f"  Temperature: {ai.get('temperature', DEFAULT_TEMPERATURE)}")
        typer.echo(f"  Timeout: {ai.get('timeout', DEFAULT_TIMEOUT)}s")

        editor = config.get("editor")
        if editor:
            typer.echo(f"  Editor: {editor}")

        jira = config.get("jira") or {}
        if jira.get("endpoint"):
            typer.echo(f"  Jira: {jira.get('user', '')} @ {jira['endpoint']}")
        linear = config.get("linear") or {}
        if linear.get("api_key"):
            typer.echo(f"  Linear API Key: {_mask(linear['api_key'])}")

        typer.echo()

        provider_str = ai.get("provider")
        if provider_str:
            provider = _parse_provider(provider_str)
            env_var = API_KEY_ENV_VARS[provider]
            api_key = global_config.get_credential(env_var)

            if api_key:
                typer.echo(f"  API Key ({env_var}): {_mask(api_key)}")
            else:
                typer.echo(f"  API Key ({env_var}): not set")


@config_app.command("set-key")
def config_set_key(
    provider: str = typer.Argument(..., help=f"Provider name ({PROVIDER_NAMES})"),
) -> None:
    """Set or update an API key for a provider."""
    with handle_errors():
        llm_provider = _parse_provider(provider)
        env_var = API_KEY_ENV_VARS[llm_provider]

        typer.echo(f"Setting API key for {llm_provider.value}")
        api_key = typer.prompt(f"Enter your {llm_provider.value} API key", hide_input=True)

        global_config.save_credential(env_var, api_key)

        typer.echo(f"✓ API key saved for {llm_provider.value}")


@config_app.command("set-provider")
def config_set_provider(
    provider: str = typer.Argument(..., help=f"Provider name ({PROVIDER_NAMES})"),
    model: str = typer.Option(
        None,
        "--model",
        "-m",
        help="Model name (optional, will prompt if not provided)",
    ),
) -> None:
    """Set the LLM provider and model used for AI summaries."""
    with handle_errors():
        llm_provider = _parse_provider(provider)
        models = AVAILABLE_MODELS[llm_provider]

        if not model:
            typer.echo(f"Available models for {llm_provider.value}:")
            for i, m in enumerate(models, 1):
                typer.echo(f"  {i}. {m}")

            model_choice = typer.prompt(f"Select a model (1-{len(models)})", type=int, default=1)
            if model_choice < 1 or model_choice > len(models):
                typer.echo("Invalid choice. Aborting.", err=True)
                raise typer.Exit(1)

            model = models[model_choice - 1]
        elif model not in models:
            typer.echo(f"Warning: {model} is not in the list of known models for {llm_provider.value}")
            if not typer.confirm("Continue anyway?", default=False):
                raise typer.Exit(0)

        global_config.set_provider_and_model(llm_provider, model)

        typer.echo(f"✓ Provider set to: {llm_provider.value}")
        typer.echo(f"✓ Model set to: {model}")
