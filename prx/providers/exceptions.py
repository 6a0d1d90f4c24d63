"""Issue provider exception classes.

Contains:
- IssueProviderError: Raised when an issue tracker request fails
- IssueNotFoundError: Raised when the requested issue doesn't exist
"""

from prx.exceptions import PrxError


class IssueProviderError(PrxError):
    """Raised when an issue tracker request fails."""

    pass


class IssueNotFoundError(IssueProviderError):
    """Raised when the requested issue doesn't exist."""

    pass
