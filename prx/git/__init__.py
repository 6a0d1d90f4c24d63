"""Git command wrappers for prx.

This package provides:
- exceptions: GitError, NotInRepositoryError
- runner: _run_git_command, get_repo_root
- branch: get_current_branch, push_branch, checkout_new_branch, get_branch_commits
- diff: parse_diff_stat, get_changed_files, get_word_diff, get_summary_diff
"""

# Exceptions
from prx.git.exceptions import (
    GitError,
    NotInRepositoryError,
)

# Runner utilities
from prx.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Branch utilities
from prx.git.branch import (
    checkout_new_branch,
    get_branch_commits,
    get_current_branch,
    push_branch,
)

# Diff utilities
from prx.git.diff import (
    MIN_CHANGED_LINES,
    get_changed_files,
    get_summary_diff,
    get_word_diff,
    parse_diff_stat,
)


__all__ = [
    # Exceptions
    "GitError",
    "NotInRepositoryError",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Branch
    "checkout_new_branch",
    "get_branch_commits",
    "get_current_branch",
    "push_branch",
    # Diff
    "MIN_CHANGED_LINES",
    "get_changed_files",
    "get_summary_diff",
    "get_word_diff",
    "parse_diff_stat",
]
