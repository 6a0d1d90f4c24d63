"""Issue tracker integrations for prx.

This package provides:
- base: BaseIssueProvider, LABEL_TO_TYPE, JIRA_ISSUE_TYPE_TO_TYPE
- exceptions: IssueProviderError, IssueNotFoundError
- github: GitHubIssueProvider (gh CLI)
- jira: JiraIssueProvider (REST API)
- linear: LinearIssueProvider (GraphQL API)
- get_issue_provider: Build the provider configured for the repository
"""

from prx import global_config
from prx.exceptions import ConfigError
from prx.providers.base import (
    JIRA_ISSUE_TYPE_TO_TYPE,
    LABEL_TO_TYPE,
    BaseIssueProvider,
)
from prx.providers.exceptions import IssueNotFoundError, IssueProviderError
from prx.settings.models import RepositoryConfig


def get_issue_provider(config: RepositoryConfig) -> BaseIssueProvider:
    """Build the issue provider configured for the repository.

    Jira and Linear credentials are read from the setup config, falling back
    to environment variables.

    Raises:
        ConfigError: If the provider is unknown or its settings are incomplete.
    """
    provider = config.issue.provider

    if provider == "github":
        from prx.providers.github import GitHubIssueProvider

        return GitHubIssueProvider(issue_list_flags=config.checkout_new.github.issue_list_flags)

    elif provider == "jira":
        from prx.providers.jira import JiraIssueProvider

        return JiraIssueProvider(
            settings=global_config.get_jira_settings(),
            issue_jql=config.checkout_new.jira.issue_jql,
        )

    elif provider == "linear":
        from prx.providers.linear import LinearIssueProvider

        return LinearIssueProvider(settings=global_config.get_linear_settings())

    else:
        raise ConfigError(f"Invalid provider '{provider}'")


__all__ = [
    "BaseIssueProvider",
    "IssueNotFoundError",
    "IssueProviderError",
    "JIRA_ISSUE_TYPE_TO_TYPE",
    "LABEL_TO_TYPE",
    "get_issue_provider",
]
