"""GitHub CLI (gh) wrappers.

Contains:
- GitHubCLIError: Raised when a gh command fails
- _run_gh_command: Run a gh command and return its output
- get_default_branch: Get the default branch of the current repository
- create_label / create_labels: Create labels, ignoring ones that already exist
- PullRequestOptions: Pass-through flags for `gh pr create`
- build_pr_create_args / create_pull_request: Create the pull request
"""

import logging
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Sequence

from prx.exceptions import PrxError
from prx.models import PullRequest

logger = logging.getLogger(__name__)


class GitHubCLIError(PrxError):
    """Raised when a gh command fails."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


def _run_gh_command(args: list[str]) -> str:
    """Run a gh command and return its output.

    Args:
        args: List of arguments to pass to gh.

    Returns:
        The stdout of the gh command.

    Raises:
        GitHubCLIError: If the command fails.
    """
    logger.debug("Running: gh %s", " ".join(args[:2]))
    try:
        result = subprocess.run(
            ["gh"] + args,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise GitHubCLIError(f"GitHub CLI command failed: gh {' '.join(args[:2])}\n{stderr}", stderr=stderr) from e
    except FileNotFoundError as e:
        raise GitHubCLIError("GitHub CLI (gh) is not installed or not in PATH.") from e


def get_default_branch() -> str:
    """Get the default branch of the current repository."""
    return _run_gh_command(["repo", "view", "--json", "defaultBranchRef", "--jq", ".defaultBranchRef.name"])


def create_label(label: str) -> None:
    """Create a label in the current repository unless it already exists."""
    try:
        _run_gh_command(["label", "create", label])
    except GitHubCLIError as e:
        if "already exists" in e.stderr:
            logger.debug("Label '%s' already exists", label)
            return
        raise GitHubCLIError(f"Failed to create label '{label}': {e}", stderr=e.stderr) from e


def create_labels(labels: Sequence[str]) -> None:
    """Create labels concurrently, ignoring those that already exist.

    Raises:
        GitHubCLIError: If any label could not be created.
    """
    if not labels:
        return

    with ThreadPoolExecutor(max_workers=len(labels)) as executor:
        futures = [executor.submit(create_label, label) for label in labels]

    for future in futures:
        # Re-raises the first failure
        future.result()


@dataclass
class PullRequestOptions:
    """Flags passed through to `gh pr create`."""

    draft: bool = False
    head: Optional[str] = None
    web: bool = False
    reviewers: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    milestone: Optional[str] = None
    no_maintainer_edit: bool = False
    recover: Optional[str] = None


def build_pr_create_args(pr: PullRequest, base: str, options: PullRequestOptions) -> list[str]:
    """Build the arguments of `gh pr create`.

    Labels given on the command line come before the ones derived from the branch.
    """
    args = ["pr", "create", "--title", pr.title, "--body", pr.body, "--base", base]

    if options.assignees:
        args += ["--assignee", ",".join(options.assignees)]
    labels = list(options.labels) + list(pr.labels)
    if labels:
        args += ["--label", ",".join(labels)]
    if options.projects:
        args += ["--project", ",".join(options.projects)]
    if options.milestone:
        args += ["--milestone", options.milestone]
    if options.reviewers:
        args += ["--reviewer", ",".join(options.reviewers)]
    if options.draft:
        args.append("--draft")
    if options.web:
        args.append("--web")
    if options.no_maintainer_edit:
        args.append("--no-maintainer-edit")
    if options.recover:
        args += ["--recover", options.recover]
    if options.head:
        args += ["--head", options.head]

    return args


def create_pull_request(pr: PullRequest, base: str, options: PullRequestOptions) -> str:
    """Create the pull request with gh.

    Returns:
        The output of gh (the pull request URL).
    """
    return _run_gh_command(build_pr_create_args(pr, base, options))
