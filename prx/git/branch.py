"""Git branch and commit utilities.

Contains:
- get_current_branch: Get the current branch name
- push_branch: Push a branch to origin and set its upstream
- checkout_new_branch: Create and switch to a new branch
- get_branch_commits: Get the commit subjects of a branch that are not on its base
"""

from prx.git.exceptions import GitError
from prx.git.runner import _run_git_command


def get_current_branch() -> str:
    """Get the current branch name.

    Raises:
        GitError: If HEAD is detached.
    """
    branch = _run_git_command(["branch", "--show-current"])
    if not branch:
        raise GitError("HEAD is detached. Please check out a branch first.")
    return branch


def push_branch(branch: str, remote: str = "origin") -> str:
    """Push ``branch`` to ``remote`` and set it as upstream.

    Returns:
        The output of git push.
    """
    return _run_git_command(["push", "--set-upstream", remote, branch])


def checkout_new_branch(branch: str) -> str:
    """Create ``branch`` from HEAD and switch to it."""
    return _run_git_command(["checkout", "-b", branch])


def get_branch_commits(branch: str, base: str) -> list[str]:
    """Get the subjects of the commits on ``branch`` that are not on ``base``.

    Merge commits are excluded.

    Returns:
        Commit subject lines, newest first.
    """
    output = _run_git_command(["log", "--pretty=format:%s", "--no-merges", branch, f"^{base}"])
    if not output:
        return []
    return output.split("\n")
