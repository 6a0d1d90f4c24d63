"""Data models for the repository configuration.

Contains:
- BranchConfig: Branch name template, pattern and normalization settings
- PullRequestConfig: Pull request title/body templates and checklist settings
- IssueConfig: Issue provider and issue type vocabulary
- CheckoutNewConfig: Issue listing settings per provider
- RepositoryConfig: The complete repository configuration
"""

from dataclasses import dataclass, field

from prx.settings.constants import (
    CHECKLIST_ANSWERS,
    DEFAULT_BODY,
    DEFAULT_BRANCH_PATTERN,
    DEFAULT_BRANCH_TEMPLATE,
    DEFAULT_CHECKLIST_CONFIRM_ANSWER,
    DEFAULT_GITHUB_ISSUE_LIST_FLAGS,
    DEFAULT_IGNORE_COMMITS_PATTERNS,
    DEFAULT_ISSUE_TYPES,
    DEFAULT_JIRA_JQL_SUFFIX,
    DEFAULT_MAX_LENGTH,
    DEFAULT_PROVIDER,
    DEFAULT_PULL_REQUEST_TEMPLATE_PATH,
    DEFAULT_TITLE,
    DEFAULT_TOKEN_SEPARATORS,
    DEFAULT_VARIABLE_PATTERNS,
    IMPLICIT_TOKEN_SEPARATOR,
    PROVIDERS,
)


@dataclass
class BranchConfig:
    """Configuration for branch names.

    Attributes:
        template: Render-direction template (issue -> branch name).
        pattern: Parse-direction pattern (branch name -> fields).
        variable_patterns: Placeholder name -> regex fragment used by ``pattern``.
        token_separators: Single-character word separators; "/" is always included.
        max_length: Longest generated name accepted without offering an edit.
    """

    template: str = DEFAULT_BRANCH_TEMPLATE
    pattern: str = DEFAULT_BRANCH_PATTERN
    variable_patterns: dict[str, str] = field(
        default_factory=lambda: DEFAULT_VARIABLE_PATTERNS.copy())
    token_separators: list[str] = field(
        default_factory=lambda: DEFAULT_TOKEN_SEPARATORS.copy())
    max_length: int = DEFAULT_MAX_LENGTH

    def __post_init__(self):
        self.token_separators = list(self.token_separators)
        if IMPLICIT_TOKEN_SEPARATOR not in self.token_separators:
            self.token_separators.append(IMPLICIT_TOKEN_SEPARATOR)

    def validate(self) -> list[str]:
        """Return a list of problems with this configuration."""
        problems = []
        for separator in self.token_separators:
            if len(separator) != 1:
                problems.append(
                    f"branch.token_separators: Invalid token separator '{separator}': "
                    f"Should be exactly 1 character"
                )
        if self.max_length <= 0:
            problems.append("branch.max_length: Should be a positive number")
        return problems


@dataclass
class PullRequestConfig:
    """Configuration for pull requests.

    Attributes:
        title: Title template, rendered strictly (missing fields are prompted for).
        body: Body template, rendered leniently (missing fields render empty).
        ignore_commits_patterns: Commit subject parts matching any pattern are dropped.
        answer_checklist: Whether to resolve markdown checklist items in the body.
        checklist_confirm_answer: Answer applied to every checklist item when
            prompts are skipped (--confirm): yes, no or skip.
        push_to_remote: Push the branch before creating the pull request.
    """

    title: str = DEFAULT_TITLE
    body: str = DEFAULT_BODY
    ignore_commits_patterns: list[str] = field(
        default_factory=lambda: DEFAULT_IGNORE_COMMITS_PATTERNS.copy())
    answer_checklist: bool = True
    checklist_confirm_answer: str = DEFAULT_CHECKLIST_CONFIRM_ANSWER
    push_to_remote: bool = True

    def validate(self) -> list[str]:
        """Return a list of problems with this configuration."""
        problems = []
        if self.checklist_confirm_answer not in CHECKLIST_ANSWERS:
            problems.append(
                f"pr.checklist_confirm_answer: Should be one of {', '.join(CHECKLIST_ANSWERS)}"
            )
        return problems


@dataclass
class IssueConfig:
    """Configuration for the issue tracker."""

    provider: str = DEFAULT_PROVIDER
    types: list[str] = field(default_factory=lambda: DEFAULT_ISSUE_TYPES.copy())

    def validate(self) -> list[str]:
        """Return a list of problems with this configuration."""
        if self.provider not in PROVIDERS:
            return [f"issue.provider: Invalid provider '{self.provider}', "
                    f"Provider must be one of {', '.join(PROVIDERS)}"]
        return []


@dataclass
class CheckoutNewGitHubConfig:
    """Flags passed to `gh issue list` when choosing an issue."""

    issue_list_flags: list[str] = field(
        default_factory=lambda: DEFAULT_GITHUB_ISSUE_LIST_FLAGS.copy())


@dataclass
class CheckoutNewJiraConfig:
    """JQL used to list Jira issues when choosing an issue."""

    project: str = ""
    issue_jql: str = ""

    def __post_init__(self):
        if not self.issue_jql:
            prefix = f"project={self.project}+AND+" if self.project else ""
            self.issue_jql = prefix + DEFAULT_JIRA_JQL_SUFFIX


@dataclass
class CheckoutNewConfig:
    """Issue listing configuration per provider."""

    github: CheckoutNewGitHubConfig = field(default_factory=CheckoutNewGitHubConfig)
    jira: CheckoutNewJiraConfig = field(default_factory=CheckoutNewJiraConfig)


@dataclass
class RepositoryConfig:
    """The complete repository configuration (.github/.gh-prx.yaml)."""

    branch: BranchConfig = field(default_factory=BranchConfig)
    pr: PullRequestConfig = field(default_factory=PullRequestConfig)
    issue: IssueConfig = field(default_factory=IssueConfig)
    checkout_new: CheckoutNewConfig = field(default_factory=CheckoutNewConfig)
    pull_request_template_path: str = DEFAULT_PULL_REQUEST_TEMPLATE_PATH

    def validate(self) -> list[str]:
        """Return every problem found in the configuration."""
        return self.branch.validate() + self.pr.validate() + self.issue.validate()
