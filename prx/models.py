"""Value types passed between the templating core and its collaborators.

Contains:
- Branch: The fields parsed out of a branch name
- Issue: Tracker-agnostic issue representation
- PullRequest: Rendered pull request title, body and labels
"""

import re
from dataclasses import dataclass, field
from typing import Any

_INVALID_TITLE_CHARS = re.compile(r"[^.a-zA-Z0-9]")


@dataclass
class Branch:
    """A branch name parsed with the configured pattern.

    Attributes:
        original: The literal branch name that was parsed.
        fields: Placeholder name -> captured value. Values are strings right
            after parsing; templating adds sequences (Commits) on copies only.
    """

    original: str
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Issue:
    """An issue fetched from a tracker (GitHub, Jira, Linear).

    Attributes:
        key: Tracker-native identifier (e.g. "1234", "PROJ-42").
        title: Free-text issue title.
        type: Issue category (fix, feat, ...) or empty if it could not be inferred.
        suggested_branch_name: Tracker-supplied branch name hint (Linear only).
    """

    key: str
    title: str
    type: str = ""
    suggested_branch_name: str = ""

    def normalized_title(self) -> str:
        """Return the title as a branch-safe slug.

        Every character outside [.a-zA-Z0-9] becomes "-", the result is
        lowercased and leading/trailing dashes are removed.
        """
        title = _INVALID_TITLE_CHARS.sub("-", self.title)
        return title.lower().strip("-")

    def display_name(self) -> str:
        """Return the label used when offering the issue in a selection prompt."""
        prefix = f"({self.type}) " if self.type else ""
        return f"{prefix}{self.key} - {self.title}"


@dataclass
class PullRequest:
    """A rendered pull request."""

    title: str
    body: str
    labels: list[str] = field(default_factory=list)
