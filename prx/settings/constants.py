"""Default values for the repository configuration.

Contains:
- Default branch template, pattern, variable patterns and token separators
- Default pull request title and body templates
- Issue types, issue providers and checklist answers
- Configuration file locations
"""

DEFAULT_CONFIG_FILEPATH = ".github/.gh-prx.yaml"
DEFAULT_PULL_REQUEST_TEMPLATE_PATH = ".github/pull_request_template.md"

DEFAULT_TITLE = "{{.Type}}{{with .Issue}}({{.}}){{end}}: {{humanize .Description}}"

DEFAULT_BODY = """{{with .Issue}}Closes #{{.}}.

{{end}}## Description

{{if .AISummary}}{{.AISummary}}{{ else }}{{humanize .Description}}

Change(s) in this PR:
{{range $commit := .Commits}}
* {{$commit}}
{{- end}}
{{- end}}

## PR Checklist

- [ ] Tests are included
- [ ] Documentation is changed or added
"""

DEFAULT_BRANCH_TEMPLATE = "{{.Type}}/{{with .Issue}}{{.}}-{{end}}{{.Description}}"
DEFAULT_BRANCH_PATTERN = r"{{.Type}}\/({{.Issue}}-)?{{.Description}}"

DEFAULT_ISSUE_TYPES = [
    "fix",
    "feat",
    "chore",
    "docs",
    "refactor",
    "test",
    "style",
    "build",
    "ci",
    "perf",
    "revert",
]

DEFAULT_VARIABLE_PATTERNS = {
    "Type": "|".join(DEFAULT_ISSUE_TYPES),
    "Issue": r"([a-zA-Z]+\-)*[0-9]+",
    "Author": r"[a-zA-Z0-9]+",
    "Description": r".*",
}

DEFAULT_TOKEN_SEPARATORS = ["-", "_"]
# Always treated as a token separator, in addition to the configured ones
IMPLICIT_TOKEN_SEPARATOR = "/"

DEFAULT_MAX_LENGTH = 60

DEFAULT_IGNORE_COMMITS_PATTERNS = [r"^wip"]

CHECKLIST_ANSWERS = ["yes", "no", "skip"]
DEFAULT_CHECKLIST_CONFIRM_ANSWER = "yes"

PROVIDERS = ["github", "jira", "linear"]
DEFAULT_PROVIDER = "github"

DEFAULT_GITHUB_ISSUE_LIST_FLAGS = ["--state", "open", "--assignee", "@me"]
DEFAULT_JIRA_JQL_SUFFIX = "assignee=currentUser()+AND+statusCategory!=Done+ORDER+BY+updated+DESC"
