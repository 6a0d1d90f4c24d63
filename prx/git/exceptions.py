"""Git-related exception classes.

Contains all exception classes for Git operations:
- GitError: Base exception for git-related errors
- NotInRepositoryError: Raised when the working directory is not inside a git repository
"""

from prx.exceptions import PrxError


class GitError(PrxError):
    """Custom exception for git-related errors."""

    pass


class NotInRepositoryError(GitError):
    """Raised when the working directory is not inside a git repository."""

    pass
