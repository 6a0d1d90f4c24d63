"""Repository configuration for prx.

This package provides:
- constants: Default templates, patterns, separators, issue types and paths
- models: BranchConfig, PullRequestConfig, IssueConfig, CheckoutNewConfig, RepositoryConfig
- loader: load_repository_config, load_repository_config_from_dict, merge_config_dicts
"""

from prx.settings.constants import (
    CHECKLIST_ANSWERS,
    DEFAULT_BODY,
    DEFAULT_BRANCH_PATTERN,
    DEFAULT_BRANCH_TEMPLATE,
    DEFAULT_CONFIG_FILEPATH,
    DEFAULT_ISSUE_TYPES,
    DEFAULT_TITLE,
    DEFAULT_VARIABLE_PATTERNS,
    PROVIDERS,
)
from prx.settings.models import (
    BranchConfig,
    CheckoutNewConfig,
    CheckoutNewGitHubConfig,
    CheckoutNewJiraConfig,
    IssueConfig,
    PullRequestConfig,
    RepositoryConfig,
)
from prx.settings.loader import (
    get_repository_config_file,
    load_pull_request_body,
    load_repository_config,
    load_repository_config_from_dict,
    merge_config_dicts,
    repository_config_to_dict,
)


__all__ = [
    "CHECKLIST_ANSWERS",
    "DEFAULT_BODY",
    "DEFAULT_BRANCH_PATTERN",
    "DEFAULT_BRANCH_TEMPLATE",
    "DEFAULT_CONFIG_FILEPATH",
    "DEFAULT_ISSUE_TYPES",
    "DEFAULT_TITLE",
    "DEFAULT_VARIABLE_PATTERNS",
    "PROVIDERS",
    "BranchConfig",
    "CheckoutNewConfig",
    "CheckoutNewGitHubConfig",
    "CheckoutNewJiraConfig",
    "IssueConfig",
    "PullRequestConfig",
    "RepositoryConfig",
    "get_repository_config_file",
    "load_pull_request_body",
    "load_repository_config",
    "load_repository_config_from_dict",
    "merge_config_dicts",
    "repository_config_to_dict",
]
