"""CLI entry point for prx.

This module provides the main CLI application that combines all commands
and subcommands into a single unified interface.
"""

import typer

from prx.cli.checkout_new import checkout_new_command
from prx.cli.config import config_app
from prx.cli.create import create_command
from prx.cli.main import main_command
from prx.cli.setup import setup_app

# Main application
app = typer.Typer(
    name="prx",
    help="prx: Extended Git & GitHub CLI flows",
    add_completion=False,
)

# Add subcommand groups
app.add_typer(setup_app, name="setup")
app.add_typer(config_app, name="config")

# Add individual commands, with their aliases
app.command("create")(create_command)
app.command("new", hidden=True)(create_command)
app.command("checkout-new")(checkout_new_command)
for alias in ("switch-create", "sc", "cob"):
    app.command(alias, hidden=True)(checkout_new_command)

# Global options (--debug, --version)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "config_app",
    "setup_app",
    "checkout_new_command",
    "create_command",
    "main_command",
]
