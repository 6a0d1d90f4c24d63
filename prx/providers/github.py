"""GitHub issue provider (via the gh CLI)."""

import logging
from typing import Mapping, Optional, Sequence

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from prx.gh import GitHubCLIError, _run_gh_command
from prx.models import Issue
from prx.providers.base import BaseIssueProvider, type_from_labels
from prx.providers.exceptions import IssueNotFoundError, IssueProviderError
from prx.settings.constants import DEFAULT_GITHUB_ISSUE_LIST_FLAGS

logger = logging.getLogger(__name__)

ISSUE_JSON_FIELDS = "number,title,labels"


class GitHubLabel(BaseModel):
    name: str


class GitHubIssue(BaseModel):
    """Issue as returned by `gh issue view/list --json number,title,labels`."""

    number: int
    title: str
    labels: list[GitHubLabel] = Field(default_factory=list)

    def to_issue(self, label_to_type: Mapping[str, str]) -> Issue:
        return Issue(
            key=str(self.number),
            title=self.title,
            type=type_from_labels([label.name for label in self.labels], label_to_type),
        )


_ISSUE_LIST = TypeAdapter(list[GitHubIssue])


class GitHubIssueProvider(BaseIssueProvider):
    """Issues of the current GitHub repository."""

    name = "GitHub"

    def __init__(
        self,
        issue_list_flags: Optional[Sequence[str]] = None,
        type_mapping: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(type_mapping)
        self.issue_list_flags = list(
            DEFAULT_GITHUB_ISSUE_LIST_FLAGS if issue_list_flags is None else issue_list_flags)

    def get(self, issue_id: str) -> Issue:
        try:
            output = _run_gh_command(["issue", "view", issue_id.lstrip("#"), "--json", ISSUE_JSON_FIELDS])
        except GitHubCLIError as e:
            if "Could not resolve" in e.stderr or "not found" in e.stderr.lower():
                raise IssueNotFoundError(f"GitHub issue '{issue_id}' not found") from e
            raise IssueProviderError(f"Failed to get GitHub issue: {e}") from e

        try:
            issue = GitHubIssue.model_validate_json(output)
        except ValidationError as e:
            raise IssueProviderError(f"Failed to parse GitHub issue: {e}") from e

        return issue.to_issue(self.type_mapping)

    def list(self) -> list[Issue]:
        args = ["issue", "list", "--json", ISSUE_JSON_FIELDS] + self.issue_list_flags
        try:
            output = _run_gh_command(args)
        except GitHubCLIError as e:
            raise IssueProviderError(f"Failed to list GitHub issues: {e}") from e

        try:
            issues = _ISSUE_LIST.validate_json(output or "[]")
        except ValidationError as e:
            raise IssueProviderError(f"Failed to parse GitHub issues: {e}") from e

        logger.debug("Listed %d GitHub issues", len(issues))
        return [issue.to_issue(self.type_mapping) for issue in issues]

