"""CLI command for creating a pull request from the current branch."""

import functools
import logging
from typing import Callable, Optional

import typer

from prx import gh
from prx.cli.utils import handle_errors, load_repository, split_list_option
from prx.git import get_branch_commits, get_current_branch, push_branch
from prx.pr import template_pr
from prx.settings import load_pull_request_body
from prx.summary import build_ai_summarizer
from prx.templating import TemplateRenderer, parse_branch

logger = logging.getLogger(__name__)


def _cached(fetcher: Callable[[], list[str]]) -> Callable[[], list[str]]:
    """Call ``fetcher`` at most once; the PR body and the AI summary share the commits."""
    return functools.lru_cache(maxsize=None)(fetcher)


def create_command(
    confirm: bool = typer.Option(False, "--confirm", "-y", help="Don't ask for user input"),
    draft: bool = typer.Option(False, "--draft", "-d", help="Mark pull request as a draft"),
    base: Optional[str] = typer.Option(
        None, "--base", "-B", help="The branch into which you want your code merged"),
    head: Optional[str] = typer.Option(
        None, "--head", "-H",
        help="The branch that contains commits for your pull request (default: current branch)"),
    web: bool = typer.Option(False, "--web", "-w", help="Open the web browser to create a pull request"),
    reviewer: Optional[list[str]] = typer.Option(
        None, "--reviewer", "-r", help="Request reviews from people or teams by their handle"),
    assignee: Optional[list[str]] = typer.Option(
        None, "--assignee", "-a", help='Assign people by their login. Use "@me" to self-assign.'),
    label: Optional[list[str]] = typer.Option(None, "--label", "-l", help="Add labels by name"),
    project: Optional[list[str]] = typer.Option(
        None, "--project", "-p", help="Add the pull request to projects by name"),
    milestone: Optional[str] = typer.Option(
        None, "--milestone", "-m", help="Add the pull request to a milestone by name"),
    no_maintainer_edit: bool = typer.Option(
        False, "--no-maintainer-edit", help="Disable maintainer's ability to modify pull request"),
    recover: Optional[str] = typer.Option(
        None, "--recover", help="Recover input from a failed run of create"),
    no_ai_summary: bool = typer.Option(False, "--no-ai-summary", help="Disable AI-powered summary"),
    dry_run: bool = typer.Option(
        False, "--dry-run",
        help="Print the pull request title and body without creating the pull request"),
) -> None:
    """Create a pull request on GitHub, extended.

    The branch is pushed to origin first (disable with pr.push_to_remote: false).
    The title is generated from the current branch name and the config file.
    The body template can be defined in .github/pull_request_template.md.
    """
    with handle_errors():
        repo_root, config = load_repository()

        branch_name = get_current_branch()
        branch = parse_branch(branch_name, config.branch.pattern, config.branch.variable_patterns)

        if config.pr.push_to_remote:
            typer.echo("Pushing current branch to remote...", err=True)
            output = push_branch(branch.original)
            if output:
                logger.info(output)

        base_branch = base
        if not base_branch:
            typer.echo("Fetching repository default branch...", err=True)
            base_branch = gh.get_default_branch()

        config.pr.body = load_pull_request_body(repo_root, config)

        commits_fetcher = _cached(lambda: get_branch_commits(branch.original, base_branch))
        ai_summarizer = build_ai_summarizer(
            base=base_branch,
            pr_body=config.pr.body,
            commits_fetcher=commits_fetcher,
            enabled=not no_ai_summary,
        )

        pr = template_pr(
            branch,
            config.pr,
            confirm=confirm,
            token_separators=config.branch.token_separators,
            commits_fetcher=commits_fetcher,
            ai_summarizer=ai_summarizer,
            renderer=TemplateRenderer(config.branch.token_separators),
        )

        if dry_run:
            typer.echo(f"Title: {pr.title}")
            typer.echo(f"Labels: {', '.join(pr.labels)}")
            typer.echo("")
            typer.echo(pr.body)
            typer.echo("Dry run enabled, skipping pull request creation", err=True)
            return

        if pr.labels:
            typer.echo("Creating labels (if not exist)...", err=True)
            gh.create_labels(pr.labels)

        options = gh.PullRequestOptions(
            draft=draft,
            head=head,
            web=web,
            reviewers=split_list_option(reviewer),
            assignees=split_list_option(assignee),
            labels=split_list_option(label),
            projects=split_list_option(project),
            milestone=milestone,
            no_maintainer_edit=no_maintainer_edit,
            recover=recover,
        )

        typer.echo("Creating pull request...", err=True)
        output = gh.create_pull_request(pr, base_branch, options)
        typer.echo(output)
