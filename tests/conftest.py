"""Shared test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from prx.models import Branch, Issue
from prx.settings.models import BranchConfig, PullRequestConfig
from prx.templating import TemplateRenderer


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_repo_root(temp_dir):
    """Create a mock git repository root directory."""
    # Create .git and .github directories to simulate a git repo
    (temp_dir / ".git").mkdir()
    (temp_dir / ".github").mkdir()
    return temp_dir


@pytest.fixture
def renderer():
    """Template renderer with the default token separators."""
    return TemplateRenderer(BranchConfig().token_separators)


@pytest.fixture
def branch_cfg():
    """Default branch configuration."""
    return BranchConfig()


@pytest.fixture
def pr_cfg():
    """Default pull request configuration."""
    return PullRequestConfig()


@pytest.fixture
def sample_branch():
    """A branch parsed with the default pattern."""
    return Branch(
        original="fix/1234-fix-thing",
        fields={"Type": "fix", "Issue": "1234", "Description": "fix-thing"},
    )


@pytest.fixture
def sample_issue():
    """A typed issue."""
    return Issue(key="42", title="Add foo bar", type="feat")


@pytest.fixture
def mock_git_commands(mocker):
    """Mock subprocess.run for git commands."""
    return mocker.patch("subprocess.run")
