"""CLI command for creating a branch from an issue."""

import logging
from typing import Optional

import typer

from prx import global_config, prompts
from prx.branch import template_branch_name
from prx.cli.utils import handle_errors, load_repository
from prx.exceptions import PrxError
from prx.git import checkout_new_branch
from prx.providers import BaseIssueProvider, get_issue_provider

logger = logging.getLogger(__name__)


def choose_issue(provider: BaseIssueProvider) -> str:
    """List the provider's issues and let the user pick one.

    Returns:
        The key of the chosen issue.

    Raises:
        PrxError: If there are no issues to choose from.
    """
    typer.echo(f"Fetching issues from {provider.name}...", err=True)
    issues = provider.list()
    if not issues:
        raise PrxError("No issues found")

    options = [issue.display_name() for issue in issues]
    choice = prompts.select("Select an issue:", options)
    return issues[options.index(choice)].key


def checkout_new_command(
    issue_id: Optional[str] = typer.Argument(
        None,
        help="The issue to create a branch for (prompts with your open issues if omitted)",
    ),
) -> None:
    """Create a new branch based on an issue and checkout to it."""
    with handle_errors():
        _, config = load_repository()
        provider = get_issue_provider(config)

        if not issue_id:
            issue_id = choose_issue(provider)

        typer.echo("Fetching issue from provider...", err=True)
        issue = provider.get(issue_id)

        branch_name = template_branch_name(
            config.branch,
            config.issue.types,
            issue,
            editor=global_config.get_editor_preference(),
        )

        logger.debug("Creating branch '%s' and checking out to it", branch_name)
        checkout_new_branch(branch_name)
        typer.echo(f"Switched to a new branch '{branch_name}'")
