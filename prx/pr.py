"""Pull request templating.

Contains:
- TYPE_TO_LABEL: Branch type -> GitHub label
- fetch_commits: Fetch, split, filter and order commit subjects for the body
- answer_pr_checklist: Resolve markdown checklist items in the body
- resolve_labels: Derive pull request labels from the branch fields
- template_pr: Render the pull request title, body and labels
"""

import logging
import re
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Sequence

from prx import prompts
from prx.exceptions import ConfigError, ExternalCallError, MissingFieldError, TemplateError
from prx.models import Branch, PullRequest
from prx.settings.constants import CHECKLIST_ANSWERS
from prx.settings.models import PullRequestConfig
from prx.templating import TemplateRenderer

logger = logging.getLogger(__name__)

CommitsFetcher = Callable[[], Sequence[str]]
AISummarizer = Callable[[], str]

TYPE_TO_LABEL = MappingProxyType({
    "fix": "bug",
    "feat": "enhancement",
    "docs": "documentation",
})

# Leading "- [ ]", "- [x]" or "* [ ]" of a markdown checklist item
CHECKBOX = re.compile(r"^\s*[\-\*]\s*\[(x|\s)\]")
# Commit subjects are split on bullet characters into separate entries
COMMIT_SEPARATOR = re.compile(r"[\*\-]")

COMMITS_REFERENCE = ".Commits"
AI_SUMMARY_REFERENCE = ".AISummary"


def fetch_commits(ignore_patterns: Sequence[str], fetcher: CommitsFetcher) -> list[str]:
    """Fetch the commit entries listed in the pull request body.

    Each subject is split on ``*`` and ``-`` into parts. Parts that are blank
    or match any of ``ignore_patterns`` are dropped. The fetcher returns the
    newest commit first, so the result is reversed into chronological order.

    Args:
        ignore_patterns: Regular expressions of commit parts to drop.
        fetcher: Callback returning commit subjects, newest first.

    Returns:
        The commit entries, oldest first.

    Raises:
        ConfigError: If the ignore patterns are not valid regular expressions.
        ExternalCallError: If the fetcher fails.
    """
    ignore_matcher = None
    if ignore_patterns:
        try:
            ignore_matcher = re.compile("|".join(ignore_patterns))
        except re.error as e:
            raise ConfigError(f"pr.ignore_commits_patterns: Failed to compile: {e}") from e

    logger.debug("Fetching commits")
    try:
        commits = list(fetcher())
    except Exception as e:
        raise ExternalCallError("fetch commits", e) from e

    parts = []
    for commit in commits:
        for part in COMMIT_SEPARATOR.split(commit):
            part = part.strip()
            if not part:
                continue
            if ignore_matcher is not None and ignore_matcher.search(part):
                continue
            parts.append(part)

    parts.reverse()
    logger.debug("Commits: %s", parts)
    return parts


def _checklist_answer(question: str, confirm: bool, confirm_answer: str) -> str:
    if confirm:
        return confirm_answer
    return prompts.select(question, CHECKLIST_ANSWERS)


def answer_pr_checklist(body: str, confirm: bool, confirm_answer: str = "yes") -> str:
    """Resolve the markdown checklist items of a pull request body.

    For every checklist line the answer "yes" checks the item, "no" unchecks
    it and "skip" removes the line. With ``confirm`` every item gets
    ``confirm_answer`` without prompting.

    Args:
        body: The rendered body.
        confirm: Skip prompts and apply ``confirm_answer`` to every item.
        confirm_answer: One of yes, no or skip.

    Returns:
        The body with the checklist resolved.

    Raises:
        InteractionError: If a prompt is cancelled.
    """
    if confirm:
        logger.info("Answering '%s' to all checklist items", confirm_answer)

    lines = []
    for line in body.split("\n"):
        if CHECKBOX.match(line):
            question = CHECKBOX.sub("", line).strip()
            answer = _checklist_answer(question, confirm, confirm_answer)
            if answer == "skip":
                continue
            marker = "- [x]" if answer == "yes" else "- [ ]"
            line = CHECKBOX.sub(marker, line)
        lines.append(line)

    return "\n".join(lines)


def resolve_labels(fields: Mapping[str, Any]) -> list[str]:
    """Derive the pull request labels from the branch ``Type`` field."""
    issue_type = fields.get("Type")
    if not isinstance(issue_type, str):
        return []

    issue_type = issue_type.lower()
    return [TYPE_TO_LABEL.get(issue_type, issue_type)]


def _render_title(renderer: TemplateRenderer, title_template: str, fields: dict) -> str:
    """Render the title, asking the user for each field it needs but ``fields`` lacks.

    ``fields`` is updated with the answers.
    """
    asked = set()

    while True:
        try:
            return renderer.render(title_template, fields, strict=True, name="pr title template")
        except MissingFieldError as e:
            if e.key in asked:
                # The answer didn't satisfy the template, asking again wouldn't either
                raise TemplateError(
                    f"Failed to render pr title template: field '{e.key}' is still missing",
                    template=title_template,
                ) from e
            asked.add(e.key)

            logger.warning("Missing key '%s' in branch fields, prompting user to enter it manually", e.key)
            fields[e.key] = prompts.ask_required(f"Enter value for {e.key}")


def template_pr(
    branch: Branch,
    pr_cfg: PullRequestConfig,
    confirm: bool,
    token_separators: Sequence[str],
    commits_fetcher: CommitsFetcher,
    ai_summarizer: Optional[AISummarizer] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> PullRequest:
    """Render a pull request from a parsed branch.

    The title is rendered strictly: fields it needs but the branch lacks are
    asked for. The body is rendered leniently against the branch fields plus
    ``Commits`` and ``AISummary``, each fetched only if the body template
    mentions it. ``branch.fields`` is never modified.

    Args:
        branch: The parsed branch.
        pr_cfg: Pull request configuration.
        confirm: Skip the checklist prompts.
        token_separators: Separators used by ``humanize``.
        commits_fetcher: Callback returning commit subjects, newest first.
        ai_summarizer: Callback returning an AI summary of the changes.
        renderer: Template renderer; one is built from the token separators if omitted.

    Returns:
        The rendered PullRequest.

    Raises:
        TemplateError: If a template is malformed.
        ExternalCallError: If a referenced callback fails.
        InteractionError: If a prompt is cancelled.
    """
    logger.debug("Templating PR for branch '%s'", branch.original)

    renderer = renderer or TemplateRenderer(token_separators)

    fields = dict(branch.fields)
    title = _render_title(renderer, pr_cfg.title, fields)

    body_data = dict(fields)

    if COMMITS_REFERENCE in pr_cfg.body:
        body_data["Commits"] = fetch_commits(pr_cfg.ignore_commits_patterns, commits_fetcher)

    if AI_SUMMARY_REFERENCE in pr_cfg.body:
        if ai_summarizer is None:
            body_data["AISummary"] = ""
        else:
            try:
                body_data["AISummary"] = ai_summarizer()
            except Exception as e:
                raise ExternalCallError("summarize changes", e) from e

    body = renderer.render(pr_cfg.body, body_data, name="pr body template")

    if pr_cfg.answer_checklist:
        body = answer_pr_checklist(body, confirm, pr_cfg.checklist_confirm_answer)

    labels = resolve_labels(fields)
    logger.debug("PR labels: %s", labels)

    return PullRequest(title=title, body=body, labels=labels)
