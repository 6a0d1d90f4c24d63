"""Tests for prx.providers package."""

import json

import httpx
import pytest

from prx.exceptions import ConfigError
from prx.gh import GitHubCLIError
from prx.global_config import JiraSettings, LinearSettings
from prx.providers import (
    IssueNotFoundError,
    IssueProviderError,
    LABEL_TO_TYPE,
    get_issue_provider,
)
from prx.providers.base import type_from_labels
from prx.providers.github import GitHubIssueProvider
from prx.providers.jira import JiraIssueProvider
from prx.providers.linear import LINEAR_GRAPHQL_ENDPOINT, LinearIssueProvider
from prx.settings import load_repository_config_from_dict


def mock_client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestTypeFromLabels:
    """Tests for type_from_labels function."""

    def test_first_known_label_wins(self):
        """Test that the first mapped label gives the type."""
        assert type_from_labels(["good first issue", "Bug", "enhancement"], LABEL_TO_TYPE) == "fix"

    def test_no_known_label(self):
        """Test that unknown labels give no type."""
        assert type_from_labels(["question"], LABEL_TO_TYPE) == ""


class TestGitHubIssueProvider:
    """Tests for GitHubIssueProvider class."""

    def test_get(self, mocker):
        """Test fetching an issue with gh."""
        mock_gh = mocker.patch(
            "prx.providers.github._run_gh_command",
            return_value=json.dumps({"number": 42, "title": "Add foo", "labels": [{"name": "enhancement"}]}),
        )

        issue = GitHubIssueProvider().get("#42")

        assert (issue.key, issue.title, issue.type) == ("42", "Add foo", "feat")
        mock_gh.assert_called_once_with(["issue", "view", "42", "--json", "number,title,labels"])

    def test_get_not_found(self, mocker):
        """Test that a missing issue raises IssueNotFoundError."""
        mocker.patch(
            "prx.providers.github._run_gh_command",
            side_effect=GitHubCLIError("failed", stderr="GraphQL: Could not resolve to an issue"),
        )

        with pytest.raises(IssueNotFoundError):
            GitHubIssueProvider().get("999")

    def test_get_other_failure(self, mocker):
        """Test that other gh failures raise IssueProviderError."""
        mocker.patch(
            "prx.providers.github._run_gh_command",
            side_effect=GitHubCLIError("failed", stderr="HTTP 502"),
        )

        with pytest.raises(IssueProviderError) as exc_info:
            GitHubIssueProvider().get("1")

        assert not isinstance(exc_info.value, IssueNotFoundError)

    def test_list_uses_flags(self, mocker):
        """Test listing issues with the configured flags."""
        mock_gh = mocker.patch(
            "prx.providers.github._run_gh_command",
            return_value=json.dumps([
                {"number": 1, "title": "Crash", "labels": [{"name": "bug"}]},
                {"number": 2, "title": "Question", "labels": []},
            ]),
        )

        issues = GitHubIssueProvider(issue_list_flags=["--state", "all"]).list()

        assert [(i.key, i.type) for i in issues] == [("1", "fix"), ("2", "")]
        assert mock_gh.call_args[0][0] == ["issue", "list", "--json", "number,title,labels", "--state", "all"]

    def test_list_invalid_json(self, mocker):
        """Test that unparsable output raises IssueProviderError."""
        mocker.patch("prx.providers.github._run_gh_command", return_value="not json")

        with pytest.raises(IssueProviderError):
            GitHubIssueProvider().list()


JIRA_SETTINGS = JiraSettings(endpoint="https://example.atlassian.net/", user="me@example.com", token="secret")


class TestJiraIssueProvider:
    """Tests for JiraIssueProvider class."""

    def test_get(self):
        """Test fetching an issue from the REST API."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={
                "key": "PROJ-7",
                "fields": {"summary": "Broken login", "issuetype": {"name": "Bug"}},
            })

        provider = JiraIssueProvider(JIRA_SETTINGS, issue_jql="x", client=mock_client(handler))
        issue = provider.get("PROJ-7")

        assert (issue.key, issue.title, issue.type) == ("PROJ-7", "Broken login", "fix")
        assert str(requests[0].url) == "https://example.atlassian.net/rest/api/3/issue/PROJ-7"
        assert requests[0].headers["Authorization"].startswith("Basic ")

    def test_get_not_found(self):
        """Test that a 404 raises IssueNotFoundError."""
        provider = JiraIssueProvider(
            JIRA_SETTINGS, issue_jql="x", client=mock_client(lambda request: httpx.Response(404)))

        with pytest.raises(IssueNotFoundError):
            provider.get("PROJ-404")

    def test_server_error(self):
        """Test that other statuses raise IssueProviderError."""
        provider = JiraIssueProvider(
            JIRA_SETTINGS, issue_jql="x", client=mock_client(lambda request: httpx.Response(500)))

        with pytest.raises(IssueProviderError) as exc_info:
            provider.get("PROJ-1")

        assert "500" in str(exc_info.value)

    def test_list(self):
        """Test searching issues with the configured JQL."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"issues": [
                {"key": "PROJ-1", "fields": {"summary": "New page", "issuetype": {"name": "Story"}}},
                {"key": "PROJ-2", "fields": {"summary": "Spike", "issuetype": {"name": "Spike"}}},
            ]})

        provider = JiraIssueProvider(JIRA_SETTINGS, issue_jql="project=PROJ", client=mock_client(handler))
        issues = provider.list()

        assert [(i.key, i.type) for i in issues] == [("PROJ-1", "feat"), ("PROJ-2", "")]
        assert requests[0].url.path == "/rest/api/3/search"

    def test_incomplete_settings(self, monkeypatch):
        """Test that missing credentials are a configuration error."""
        monkeypatch.delenv("JIRA_TOKEN", raising=False)

        with pytest.raises(ConfigError):
            JiraIssueProvider(JiraSettings(endpoint="https://x", user="me"), issue_jql="x")


LINEAR_SETTINGS = LinearSettings(api_key="lin_api_key")


class TestLinearIssueProvider:
    """Tests for LinearIssueProvider class."""

    def test_get(self):
        """Test fetching an issue with GraphQL."""
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"data": {"issue": {
                "identifier": "ENG-12",
                "title": "Speed up sync",
                "labels": {"nodes": [{"name": "Perf"}]},
                "branchName": "me/eng-12-speed-up-sync",
            }}})

        provider = LinearIssueProvider(LINEAR_SETTINGS, client=mock_client(handler))
        issue = provider.get("ENG-12")

        assert issue.key == "ENG-12"
        assert issue.type == "perf"
        assert issue.suggested_branch_name == "me/eng-12-speed-up-sync"
        assert str(requests[0].url) == LINEAR_GRAPHQL_ENDPOINT
        assert requests[0].headers["Authorization"] == "lin_api_key"
        assert json.loads(requests[0].content)["variables"] == {"id": "ENG-12"}

    def test_get_not_found(self):
        """Test that a null issue raises IssueNotFoundError."""
        provider = LinearIssueProvider(
            LINEAR_SETTINGS, client=mock_client(lambda request: httpx.Response(200, json={"data": {"issue": None}})))

        with pytest.raises(IssueNotFoundError):
            provider.get("ENG-0")

    def test_graphql_errors(self):
        """Test that GraphQL errors raise IssueProviderError."""
        provider = LinearIssueProvider(
            LINEAR_SETTINGS,
            client=mock_client(lambda request: httpx.Response(200, json={"errors": [{"message": "Bad auth"}]})),
        )

        with pytest.raises(IssueProviderError) as exc_info:
            provider.list()

        assert "Bad auth" in str(exc_info.value)

    def test_http_error(self):
        """Test that HTTP failures raise IssueProviderError."""
        provider = LinearIssueProvider(
            LINEAR_SETTINGS, client=mock_client(lambda request: httpx.Response(401)))

        with pytest.raises(IssueProviderError):
            provider.get("ENG-1")

    def test_list(self):
        """Test listing assigned issues."""
        payload = {"data": {"viewer": {"assignedIssues": {"nodes": [
            {"identifier": "ENG-1", "title": "One", "labels": {"nodes": []}, "branchName": "b1"},
        ]}}}}
        provider = LinearIssueProvider(
            LINEAR_SETTINGS, client=mock_client(lambda request: httpx.Response(200, json=payload)))

        issues = provider.list()

        assert [(i.key, i.title, i.type) for i in issues] == [("ENG-1", "One", "")]


class TestGetIssueProvider:
    """Tests for get_issue_provider function."""

    def test_github(self):
        """Test that GitHub is the default provider."""
        provider = get_issue_provider(load_repository_config_from_dict({}))

        assert isinstance(provider, GitHubIssueProvider)
        assert provider.issue_list_flags == ["--state", "open", "--assignee", "@me"]

    def test_jira(self, mocker):
        """Test building the Jira provider from the setup config."""
        mocker.patch("prx.global_config.get_jira_settings", return_value=JIRA_SETTINGS)
        config = load_repository_config_from_dict(
            {"issue": {"provider": "jira"}, "checkout_new": {"jira": {"issue_jql": "project=X"}}})

        provider = get_issue_provider(config)

        assert isinstance(provider, JiraIssueProvider)
        assert provider.issue_jql == "project=X"

    def test_linear(self, mocker):
        """Test building the Linear provider from the setup config."""
        mocker.patch("prx.global_config.get_linear_settings", return_value=LINEAR_SETTINGS)
        config = load_repository_config_from_dict({"issue": {"provider": "linear"}})

        assert isinstance(get_issue_provider(config), LinearIssueProvider)

    def test_unknown_provider(self):
        """Test that an unknown provider is a configuration error."""
        config = load_repository_config_from_dict({"issue": {"provider": "trello"}})

        with pytest.raises(ConfigError):
            get_issue_provider(config)
