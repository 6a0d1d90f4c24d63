"""Main CLI callback: global options."""

from typing import Optional

import typer

from prx import __version__
from prx.cli.utils import setup_logging


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"prx {__version__}")
        raise typer.Exit(0)


def main_command(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show debug logs",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Extended Git & GitHub CLI flows."""
    setup_logging(debug)

    # Load the AI settings from the setup config
    from prx.config import load_config
    load_config()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
