"""Tests for prx.gh module."""

import subprocess
from unittest.mock import MagicMock

import pytest

from prx.gh import (
    GitHubCLIError,
    PullRequestOptions,
    _run_gh_command,
    build_pr_create_args,
    create_label,
    create_labels,
    create_pull_request,
    get_default_branch,
)
from prx.models import PullRequest


class TestRunGhCommand:
    """Tests for _run_gh_command function."""

    def test_successful_command(self, mocker):
        """Test that stdout is returned stripped."""
        result = MagicMock()
        result.stdout = "main\n"
        mocker.patch("subprocess.run", return_value=result)

        assert _run_gh_command(["repo", "view"]) == "main"

    def test_failed_command_keeps_stderr(self, mocker):
        """Test that failures carry gh's stderr."""
        mocker.patch(
            "subprocess.run",
            side_effect=subprocess.CalledProcessError(1, "gh", stderr="HTTP 404: Not Found\n"),
        )

        with pytest.raises(GitHubCLIError) as exc_info:
            _run_gh_command(["pr", "create"])

        assert exc_info.value.stderr == "HTTP 404: Not Found"
        assert "gh pr create" in str(exc_info.value)

    def test_gh_not_installed(self, mocker):
        """Test that a missing gh binary raises GitHubCLIError."""
        mocker.patch("subprocess.run", side_effect=FileNotFoundError())

        with pytest.raises(GitHubCLIError) as exc_info:
            _run_gh_command(["repo", "view"])

        assert "not installed" in str(exc_info.value)


class TestGetDefaultBranch:
    """Tests for get_default_branch function."""

    def test_queries_repo(self, mocker):
        """Test that the default branch comes from gh repo view."""
        mock_gh = mocker.patch("prx.gh._run_gh_command", return_value="main")

        assert get_default_branch() == "main"
        assert mock_gh.call_args[0][0][:2] == ["repo", "view"]


class TestCreateLabels:
    """Tests for create_label and create_labels functions."""

    def test_existing_label_is_ignored(self, mocker):
        """Test that an existing label is not an error."""
        mocker.patch(
            "prx.gh._run_gh_command",
            side_effect=GitHubCLIError("failed", stderr="label with name \"bug\" already exists"),
        )

        create_label("bug")

    def test_other_failures_raise(self, mocker):
        """Test that other failures are reported with the label name."""
        mocker.patch("prx.gh._run_gh_command", side_effect=GitHubCLIError("failed", stderr="HTTP 403"))

        with pytest.raises(GitHubCLIError) as exc_info:
            create_label("bug")

        assert "Failed to create label 'bug'" in str(exc_info.value)

    def test_creates_every_label(self, mocker):
        """Test that each label is created."""
        mock_gh = mocker.patch("prx.gh._run_gh_command", return_value="")

        create_labels(["bug", "enhancement"])

        created = sorted(call.args[0][2] for call in mock_gh.call_args_list)
        assert created == ["bug", "enhancement"]

    def test_no_labels(self, mocker):
        """Test that no labels means no gh calls."""
        mock_gh = mocker.patch("prx.gh._run_gh_command")

        create_labels([])

        mock_gh.assert_not_called()

    def test_failure_propagates(self, mocker):
        """Test that a failing label fails the batch."""
        mocker.patch("prx.gh._run_gh_command", side_effect=GitHubCLIError("failed", stderr="HTTP 403"))

        with pytest.raises(GitHubCLIError):
            create_labels(["bug", "docs"])


class TestBuildPrCreateArgs:
    """Tests for build_pr_create_args function."""

    PR = PullRequest(title="fix(1): thing", body="Body", labels=["bug"])

    def test_minimal(self):
        """Test the arguments without options."""
        args = build_pr_create_args(self.PR, "main", PullRequestOptions())

        assert args == [
            "pr", "create", "--title", "fix(1): thing", "--body", "Body", "--base", "main",
            "--label", "bug",
        ]

    def test_all_options(self):
        """Test that every option is passed through."""
        options = PullRequestOptions(
            draft=True,
            head="me:fix/1-thing",
            web=True,
            reviewers=["alice", "org/team"],
            assignees=["@me"],
            labels=["urgent"],
            projects=["Roadmap"],
            milestone="v1",
            no_maintainer_edit=True,
            recover="/tmp/pr.json",
        )

        args = build_pr_create_args(self.PR, "develop", options)

        assert args[args.index("--label") + 1] == "urgent,bug"
        assert args[args.index("--reviewer") + 1] == "alice,org/team"
        assert args[args.index("--assignee") + 1] == "@me"
        assert args[args.index("--project") + 1] == "Roadmap"
        assert args[args.index("--milestone") + 1] == "v1"
        assert args[args.index("--recover") + 1] == "/tmp/pr.json"
        assert args[args.index("--head") + 1] == "me:fix/1-thing"
        assert "--draft" in args
        assert "--web" in args
        assert "--no-maintainer-edit" in args

    def test_create_pull_request(self, mocker):
        """Test that gh output (the URL) is returned."""
        mock_gh = mocker.patch("prx.gh._run_gh_command", return_value="https://github.com/o/r/pull/5")

        url = create_pull_request(self.PR, "main", PullRequestOptions(draft=True))

        assert url == "https://github.com/o/r/pull/5"
        assert "--draft" in mock_gh.call_args[0][0]
