"""CLI commands for setting up issue providers."""

import typer

from prx import global_config
from prx.cli.utils import handle_errors
from prx.exceptions import ConfigError
from prx.settings import PROVIDERS

# Subcommand group for setup
setup_app = typer.Typer(
    name="setup",
    help="Setup commands.",
    add_completion=False,
)


@setup_app.command("provider")
def setup_provider(
    provider: str = typer.Argument(..., help=f"Provider name ({', '.join(PROVIDERS)})"),
    endpoint: str = typer.Option("", "--endpoint", "-e", help="Endpoint of the provider."),
    user: str = typer.Option("", "--user", "-u", help="The user to use for the provider."),
    token: str = typer.Option("", "--token", "-t", help="The token to use for the provider."),
    api_key: str = typer.Option("", "--api-key", "-a", help="The api-key to use for the provider."),
) -> None:
    """Setup a provider.

    Credentials are stored in ~/.config/gh-prx/config.yaml.
    """
    with handle_errors():
        provider = provider.lower()

        if provider == "github":
            typer.echo("GitHub issues are read with the gh CLI, run 'gh auth login' to authenticate.")
            return

        elif provider == "jira":
            if not (endpoint and user and token):
                raise ConfigError("endpoint, user and token are required for the jira provider setup")
            settings = {"endpoint": endpoint, "user": user, "token": token}

        elif provider == "linear":
            if not api_key:
                raise ConfigError("api-key is required for the linear provider setup")
            settings = {"api_key": api_key}

        else:
            raise ConfigError(
                f"Invalid provider '{provider}', Provider must be one of {', '.join(PROVIDERS)}")

        global_config.save_provider_settings(provider, settings)
        typer.echo(f"✓ Successfully setup provider '{provider}'")
