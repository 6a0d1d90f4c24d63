"""Linear issue provider (GraphQL API)."""

import logging
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from prx.global_config import LinearSettings
from prx.models import Issue
from prx.providers.base import REQUEST_TIMEOUT, BaseIssueProvider, type_from_labels
from prx.providers.exceptions import IssueNotFoundError, IssueProviderError

logger = logging.getLogger(__name__)

LINEAR_GRAPHQL_ENDPOINT = "https://api.linear.app/graphql"

_ISSUE_FIELDS = """
    identifier
    title
    state { name type }
    labels { nodes { name } }
    branchName
"""

ISSUE_QUERY = f"""
query Issue($id: String!) {{
  issue(id: $id) {{{_ISSUE_FIELDS}  }}
}}
"""

ASSIGNED_ISSUES_QUERY = f"""
query AssignedIssues {{
  viewer {{
    assignedIssues(orderBy: updatedAt, filter: {{ state: {{ type: {{ neq: "completed" }} }} }}) {{
      nodes {{{_ISSUE_FIELDS}      }}
    }}
  }}
}}
"""


class LinearLabel(BaseModel):
    name: str


class LinearLabels(BaseModel):
    nodes: list[LinearLabel] = Field(default_factory=list)


class LinearIssue(BaseModel):
    identifier: str
    title: str
    labels: LinearLabels = Field(default_factory=LinearLabels)
    branchName: str = ""

    def to_issue(self, label_to_type: Mapping[str, str]) -> Issue:
        return Issue(
            key=self.identifier,
            title=self.title,
            type=type_from_labels([label.name for label in self.labels.nodes], label_to_type),
            suggested_branch_name=self.branchName,
        )


class LinearIssueProvider(BaseIssueProvider):
    """Issues from Linear, authenticated with a personal API key."""

    name = "Linear"

    def __init__(
        self,
        settings: LinearSettings,
        type_mapping: Optional[Mapping[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ):
        super().__init__(type_mapping)
        settings.validate()
        self.settings = settings
        self.client = client or httpx.Client(timeout=REQUEST_TIMEOUT)

    def _query(self, query: str, variables: Optional[dict] = None) -> dict[str, Any]:
        try:
            response = self.client.post(
                LINEAR_GRAPHQL_ENDPOINT,
                json={"query": query, "variables": variables or {}},
                headers={"Authorization": self.settings.api_key},
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise IssueProviderError(f"Failed to query Linear: {e}") from e
        except ValueError as e:
            raise IssueProviderError(f"Failed to parse Linear response: {e}") from e

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(error.get("message", str(error)) for error in errors)
            raise IssueProviderError(f"Failed to query Linear: {messages}")

        return payload.get("data") or {}

    def get(self, issue_id: str) -> Issue:
        data = self._query(ISSUE_QUERY, {"id": issue_id})
        if not data.get("issue"):
            raise IssueNotFoundError(f"Linear issue '{issue_id}' not found")

        try:
            issue = LinearIssue.model_validate(data["issue"])
        except ValidationError as e:
            raise IssueProviderError(f"Failed to parse Linear issue: {e}") from e
        return issue.to_issue(self.type_mapping)

    def list(self) -> list[Issue]:
        data = self._query(ASSIGNED_ISSUES_QUERY)
        nodes = ((data.get("viewer") or {}).get("assignedIssues") or {}).get("nodes") or []

        try:
            issues = [LinearIssue.model_validate(node) for node in nodes]
        except ValidationError as e:
            raise IssueProviderError(f"Failed to parse Linear issues: {e}") from e

        logger.debug("Listed %d Linear issues", len(issues))
        return [issue.to_issue(self.type_mapping) for issue in issues]
