"""Branch name templating.

Contains:
- resolve_issue_type: Use the issue's type or ask the user to choose one
- template_branch_name: Render, normalize and optionally edit a branch name for an issue
"""

import logging
from typing import Optional, Sequence

from prx import prompts
from prx.models import Issue
from prx.settings.models import BranchConfig
from prx.templating import TemplateRenderer, normalize_branch_name

logger = logging.getLogger(__name__)


def resolve_issue_type(issue: Issue, issue_types: Sequence[str]) -> str:
    """Return the issue type, prompting the user when the tracker didn't supply one.

    Args:
        issue: The issue to resolve the type for.
        issue_types: The vocabulary offered to the user.

    Returns:
        The issue type.

    Raises:
        InteractionError: If the prompt is cancelled.
    """
    if issue.type:
        return issue.type

    logger.info("Could not determine issue type from the tracker, asking user")
    return prompts.select("Choose an issue type", list(issue_types))


def template_branch_name(
    branch_cfg: BranchConfig,
    issue_types: Sequence[str],
    issue: Issue,
    renderer: Optional[TemplateRenderer] = None,
    editor: Optional[str] = None,
) -> str:
    """Create a branch name for an issue.

    The template is rendered with ``Type``, ``Issue`` (the issue key),
    ``Description`` (the normalized title) and ``SuggestedBranchName``.
    The result is normalized and, if longer than ``branch_cfg.max_length``,
    the user is offered to edit it.

    Args:
        branch_cfg: Branch configuration.
        issue_types: Issue type vocabulary used when the issue has no type.
        issue: The issue the branch is for.
        renderer: Template renderer; one is built from the token separators if omitted.
        editor: Editor command used for manual edits.

    Returns:
        The branch name.

    Raises:
        TemplateError: If the branch template is malformed.
        InteractionError: If a prompt is cancelled or the editor fails.
    """
    logger.debug("Templating branch name for issue %s", issue.key)

    renderer = renderer or TemplateRenderer(branch_cfg.token_separators)
    # Fail on a malformed template before asking the user anything
    renderer.compile(branch_cfg.template, name="branch name template")

    issue_type = resolve_issue_type(issue, issue_types)

    rendered = renderer.render(
        branch_cfg.template,
        {
            "Type": issue_type,
            "Issue": issue.key,
            "Description": issue.normalized_title(),
            "SuggestedBranchName": issue.suggested_branch_name,
        },
        name="branch name template",
    )

    name = normalize_branch_name(rendered, branch_cfg.token_separators)

    if len(name) > branch_cfg.max_length:
        if prompts.confirm(f"Branch name is too long, do you want to change it?\n>> {name}"):
            edited = prompts.edit_string(name, editor=editor)
            name = normalize_branch_name(edited, branch_cfg.token_separators)

    logger.debug("Branch name: %s", name)
    return name
