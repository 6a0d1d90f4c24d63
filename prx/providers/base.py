"""Base class and lookup tables shared by the issue providers."""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Mapping, Optional

from prx.models import Issue

# Tracker label (lowercase) -> issue type
LABEL_TO_TYPE = MappingProxyType({
    "bug": "fix",
    "enhancement": "feat",
    "documentation": "docs",
    "feature": "feat",
    "feat": "feat",
    "fix": "fix",
    "chore": "chore",
    "refactor": "refactor",
    "test": "test",
    "ci": "ci",
    "perf": "perf",
    "build": "build",
    "revert": "revert",
    "style": "style",
})

# Jira issue type name (lowercase) -> issue type
JIRA_ISSUE_TYPE_TO_TYPE = MappingProxyType({
    "bug": "fix",
    "story": "feat",
    "task": "chore",
})

# Timeout (seconds) for issue tracker HTTP requests
REQUEST_TIMEOUT = 10.0


def type_from_labels(labels: list[str], label_to_type: Mapping[str, str]) -> str:
    """Return the type of the first label found in ``label_to_type``, or ""."""
    for label in labels:
        issue_type = label_to_type.get(label.lower())
        if issue_type:
            return issue_type
    return ""


class BaseIssueProvider(ABC):
    """Abstract base class for issue trackers."""

    name: str = ""

    def __init__(self, type_mapping: Optional[Mapping[str, str]] = None):
        """Initialize the provider.

        Args:
            type_mapping: Tracker label/type name -> issue type. Defaults to the
                provider's built-in table.
        """
        self.type_mapping = type_mapping if type_mapping is not None else self.default_type_mapping()

    def default_type_mapping(self) -> Mapping[str, str]:
        return LABEL_TO_TYPE

    @abstractmethod
    def get(self, issue_id: str) -> Issue:
        """Fetch a single issue.

        Raises:
            IssueNotFoundError: If the issue doesn't exist.
            IssueProviderError: If the request fails.
        """
        pass

    @abstractmethod
    def list(self) -> list[Issue]:
        """List the issues the user can start working on.

        Raises:
            IssueProviderError: If the request fails.
        """
        pass
