"""Jira issue provider (REST API v3)."""

import logging
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from prx.global_config import JiraSettings
from prx.models import Issue
from prx.providers.base import JIRA_ISSUE_TYPE_TO_TYPE, REQUEST_TIMEOUT, BaseIssueProvider
from prx.providers.exceptions import IssueNotFoundError, IssueProviderError

logger = logging.getLogger(__name__)


class JiraIssueType(BaseModel):
    name: str = ""


class JiraFields(BaseModel):
    summary: str = ""
    issuetype: JiraIssueType = Field(default_factory=JiraIssueType)


class JiraIssue(BaseModel):
    key: str
    fields: JiraFields = Field(default_factory=JiraFields)

    def to_issue(self, issue_type_to_type: Mapping[str, str]) -> Issue:
        return Issue(
            key=self.key,
            title=self.fields.summary,
            type=issue_type_to_type.get(self.fields.issuetype.name.lower(), ""),
        )


class JiraSearchResult(BaseModel):
    issues: list[JiraIssue] = Field(default_factory=list)


class JiraIssueProvider(BaseIssueProvider):
    """Issues of a Jira site, authenticated with a user and API token."""

    name = "Jira"

    def __init__(
        self,
        settings: JiraSettings,
        issue_jql: str,
        type_mapping: Optional[Mapping[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the provider.

        Args:
            settings: Jira endpoint and credentials.
            issue_jql: URL-ready JQL used to list issues.
            type_mapping: Jira issue type name -> issue type.
            client: HTTP client to use instead of a new one.
        """
        super().__init__(type_mapping)
        settings.validate()
        self.settings = settings
        self.issue_jql = issue_jql
        self.client = client or httpx.Client(timeout=REQUEST_TIMEOUT)

    def default_type_mapping(self) -> Mapping[str, str]:
        return JIRA_ISSUE_TYPE_TO_TYPE

    def _get(self, path: str) -> Any:
        url = f"{self.settings.endpoint.rstrip('/')}/{path}"
        logger.debug("Requesting %s", url)

        try:
            response = self.client.get(
                url,
                auth=(self.settings.user, self.settings.token),
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise IssueProviderError(f"Failed to request '{url}': {e}") from e

        if response.status_code == httpx.codes.NOT_FOUND:
            raise IssueNotFoundError(f"Request '{path}' not found")
        if response.status_code != httpx.codes.OK:
            raise IssueProviderError(
                f"Request '{path}' failed: {response.status_code} {response.reason_phrase}")

        try:
            return response.json()
        except ValueError as e:
            raise IssueProviderError(f"Failed to parse response of '{path}': {e}") from e

    def get(self, issue_id: str) -> Issue:
        data = self._get(f"rest/api/3/issue/{issue_id}")
        try:
            issue = JiraIssue.model_validate(data)
        except ValidationError as e:
            raise IssueProviderError(f"Failed to parse Jira issue: {e}") from e
        return issue.to_issue(self.type_mapping)

    def list(self) -> list[Issue]:
        data = self._get(f"rest/api/3/search?jql={self.issue_jql}")
        try:
            result = JiraSearchResult.model_validate(data)
        except ValidationError as e:
            raise IssueProviderError(f"Failed to parse Jira issues: {e}") from e
        return [issue.to_issue(self.type_mapping) for issue in result.issues]
