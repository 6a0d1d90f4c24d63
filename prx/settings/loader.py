"""Loading of the repository configuration.

Contains:
- load_repository_config_from_dict: Build a RepositoryConfig from a configuration dictionary
- repository_config_to_dict: Convert a RepositoryConfig to a dictionary for display
- merge_config_dicts: Merge a global configuration section under a repository one
- load_repository_config: Read, merge and validate .github/.gh-prx.yaml
- load_pull_request_body: The body template, taken from the pull request template file if present
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import yaml

from prx.exceptions import ConfigError
from prx.settings.constants import (
    DEFAULT_BODY,
    DEFAULT_BRANCH_PATTERN,
    DEFAULT_BRANCH_TEMPLATE,
    DEFAULT_CHECKLIST_CONFIRM_ANSWER,
    DEFAULT_CONFIG_FILEPATH,
    DEFAULT_GITHUB_ISSUE_LIST_FLAGS,
    DEFAULT_IGNORE_COMMITS_PATTERNS,
    DEFAULT_ISSUE_TYPES,
    DEFAULT_MAX_LENGTH,
    DEFAULT_PROVIDER,
    DEFAULT_PULL_REQUEST_TEMPLATE_PATH,
    DEFAULT_TITLE,
    DEFAULT_TOKEN_SEPARATORS,
    DEFAULT_VARIABLE_PATTERNS,
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

logger = logging.getLogger(__name__)


def _section(config_dict: dict, key: str) -> dict:
    section = config_dict.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{key}: Expected a mapping, got {type(section).__name__}")
    return section


def _bool(section: dict, key: str, default: bool) -> bool:
    value = section.get(key)
    return default if value is None else bool(value)


def load_repository_config_from_dict(config_dict: dict) -> RepositoryConfig:
    """Build a RepositoryConfig from a configuration dictionary.

    Missing or empty values fall back to the defaults.

    Args:
        config_dict: Dictionary with the repository configuration.

    Returns:
        RepositoryConfig instance (not validated).
    """
    branch_section = _section(config_dict, "branch")
    pr_section = _section(config_dict, "pr")
    issue_section = _section(config_dict, "issue")
    checkout_section = _section(config_dict, "checkout_new")
    github_section = _section(checkout_section, "github")
    jira_section = _section(checkout_section, "jira")

    variable_patterns = branch_section.get("variable_patterns")
    if variable_patterns is None:
        variable_patterns = DEFAULT_VARIABLE_PATTERNS.copy()

    branch = BranchConfig(
        template=branch_section.get("template") or DEFAULT_BRANCH_TEMPLATE,
        pattern=branch_section.get("pattern") or DEFAULT_BRANCH_PATTERN,
        variable_patterns={str(k): str(v) for k, v in variable_patterns.items()},
        token_separators=[str(sep) for sep in branch_section.get("token_separators") or DEFAULT_TOKEN_SEPARATORS],
        max_length=int(branch_section.get("max_length") or DEFAULT_MAX_LENGTH),
    )

    pr = PullRequestConfig(
        title=pr_section.get("title") or DEFAULT_TITLE,
        body=pr_section.get("body") or DEFAULT_BODY,
        ignore_commits_patterns=list(
            pr_section.get("ignore_commits_patterns") or DEFAULT_IGNORE_COMMITS_PATTERNS),
        answer_checklist=_bool(pr_section, "answer_checklist", True),
        checklist_confirm_answer=str(
            pr_section.get("checklist_confirm_answer") or DEFAULT_CHECKLIST_CONFIRM_ANSWER).lower(),
        push_to_remote=_bool(pr_section, "push_to_remote", True),
    )

    issue = IssueConfig(
        provider=issue_section.get("provider") or DEFAULT_PROVIDER,
        types=list(issue_section.get("types") or DEFAULT_ISSUE_TYPES),
    )

    checkout_new = CheckoutNewConfig(
        github=CheckoutNewGitHubConfig(
            issue_list_flags=list(
                github_section.get("issue_list_flags") or DEFAULT_GITHUB_ISSUE_LIST_FLAGS),
        ),
        jira=CheckoutNewJiraConfig(
            project=jira_section.get("project") or "",
            issue_jql=jira_section.get("issue_jql") or "",
        ),
    )

    return RepositoryConfig(
        branch=branch,
        pr=pr,
        issue=issue,
        checkout_new=checkout_new,
        pull_request_template_path=(
            config_dict.get("pull_request_template_path") or DEFAULT_PULL_REQUEST_TEMPLATE_PATH
        ),
    )


def repository_config_to_dict(config: RepositoryConfig) -> dict:
    """Convert a RepositoryConfig to a plain dictionary."""
    return asdict(config)


def merge_config_dicts(base: dict, override: dict) -> dict:
    """Merge two configuration dictionaries.

    Nested mappings are merged key by key; any other value in ``override``
    replaces the one in ``base``. Neither input is modified.

    Args:
        base: Lower-priority configuration (e.g. the global section).
        override: Higher-priority configuration (e.g. the repository file).

    Returns:
        The merged dictionary.
    """
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_repository_config_file(repo_root: Path) -> Path:
    """Return the path of the repository configuration file."""
    return repo_root / DEFAULT_CONFIG_FILEPATH


def read_repository_config_file(repo_root: Path) -> dict[str, Any]:
    """Read the repository configuration file.

    Returns:
        The parsed configuration, or an empty dict if the file doesn't exist.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    config_file = get_repository_config_file(repo_root)

    if not config_file.exists():
        logger.info("No config file found at '%s', using defaults", DEFAULT_CONFIG_FILEPATH)
        return {}

    logger.debug("Loading repository config from '%s'", config_file)
    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load config from {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Failed to load config from {config_file}: expected a mapping")
    return config


def load_repository_config(
    repo_root: Path,
    global_repository_config: Optional[dict] = None,
) -> RepositoryConfig:
    """Load, merge and validate the repository configuration.

    Args:
        repo_root: The root directory of the git repository.
        global_repository_config: The ``global`` section of the setup config.
            Values from the repository file take precedence.

    Returns:
        A validated RepositoryConfig.

    Raises:
        ConfigError: If the file is unreadable or the configuration is invalid.
    """
    config_dict = read_repository_config_file(repo_root)
    if global_repository_config:
        config_dict = merge_config_dicts(global_repository_config, config_dict)

    config = load_repository_config_from_dict(config_dict)
    logger.debug("Loaded repository config: %s", repository_config_to_dict(config))

    problems = config.validate()
    if problems:
        raise ConfigError("Invalid repository config:\n" + "\n".join(f"  - {p}" for p in problems))

    return config


def load_pull_request_body(repo_root: Path, config: RepositoryConfig) -> str:
    """Return the pull request body template.

    The pull request template file, if it exists, replaces ``pr.body``.

    Raises:
        ConfigError: If the template file exists but cannot be read.
    """
    template_path = repo_root / config.pull_request_template_path
    if not template_path.is_file():
        logger.debug("No pull request template at '%s', using pr.body", config.pull_request_template_path)
        return config.pr.body

    logger.debug("Using pull request template '%s'", template_path)
    try:
        return template_path.read_text()
    except OSError as e:
        raise ConfigError(f"Failed to read pull request template {template_path}: {e}") from e
