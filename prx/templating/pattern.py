"""Branch pattern compilation and branch name parsing.

Contains:
- compile_pattern: Turn a placeholder pattern into a regex with named groups
- parse_branch: Match a branch name against the configured pattern
"""

import logging
import re
from typing import Mapping

from prx.exceptions import NoMatchError, PatternError, UnresolvedPlaceholderError
from prx.models import Branch

logger = logging.getLogger(__name__)

# A placeholder left in the pattern after substitution
_PLACEHOLDER = re.compile(r"\{\{\.([A-Za-z_][A-Za-z0-9_]*)\}\}")


def placeholder_token(name: str) -> str:
    """Return the literal placeholder token for a field name (e.g. "{{.Issue}}")."""
    return "{{." + name + "}}"


def expand_pattern(pattern: str, variable_patterns: Mapping[str, str]) -> str:
    """Substitute every known placeholder in a pattern with a named group.

    The first occurrence of ``{{.Name}}`` becomes ``(?P<Name>fragment)``.
    Later occurrences of the same placeholder become a backreference
    ``(?P=Name)``, so a repeated placeholder must capture the same text.
    Everything outside the placeholders is kept as raw regex syntax.

    Args:
        pattern: The pattern string from the branch configuration.
        variable_patterns: Placeholder name -> regex fragment.

    Returns:
        The regular expression source.

    Raises:
        UnresolvedPlaceholderError: If a placeholder has no fragment.
    """
    expanded = pattern
    for placeholder, fragment in variable_patterns.items():
        token = placeholder_token(placeholder)
        if token not in expanded:
            continue
        head, _, tail = expanded.partition(token)
        tail = tail.replace(token, f"(?P={placeholder})")
        expanded = f"{head}(?P<{placeholder}>{fragment}){tail}"

    unresolved = _PLACEHOLDER.findall(expanded)
    if unresolved:
        names = ", ".join(sorted(set(unresolved)))
        raise UnresolvedPlaceholderError(
            f"Branch pattern '{pattern}' uses placeholder(s) without a variable pattern: {names}",
            pattern=pattern,
            placeholders=sorted(set(unresolved)),
        )

    return expanded


def compile_pattern(pattern: str, variable_patterns: Mapping[str, str]) -> re.Pattern:
    """Compile a branch pattern into a regular expression with named groups.

    Args:
        pattern: The pattern string (e.g. ``{{.Type}}\\/({{.Issue}}-)?{{.Description}}``).
        variable_patterns: Placeholder name -> regex fragment.

    Returns:
        The compiled regular expression.

    Raises:
        UnresolvedPlaceholderError: If a placeholder has no fragment.
        PatternError: If the expanded pattern is not a valid regular expression.
    """
    expanded = expand_pattern(pattern, variable_patterns)
    try:
        compiled = re.compile(expanded)
    except re.error as e:
        raise PatternError(
            f"Failed to compile branch pattern '{pattern}' (expanded to '{expanded}'): {e}",
            pattern=pattern,
        ) from e

    logger.debug("Compiled branch pattern '%s' to '%s'", pattern, expanded)
    return compiled


def parse_branch(name: str, pattern: str, variable_patterns: Mapping[str, str]) -> Branch:
    """Parse a branch name into its fields.

    The whole name must match the compiled pattern. Every named group in the
    pattern becomes a field; groups that did not participate in the match
    map to an empty string.

    Args:
        name: The literal branch name.
        pattern: The pattern string from the branch configuration.
        variable_patterns: Placeholder name -> regex fragment.

    Returns:
        The parsed Branch.

    Raises:
        PatternError: If the pattern cannot be compiled.
        NoMatchError: If the branch name does not match the pattern.
    """
    logger.debug("Parsing branch name '%s'", name)

    try:
        branch_regex = compile_pattern(pattern, variable_patterns)
    except UnresolvedPlaceholderError as e:
        e.name = name
        raise

    match = branch_regex.fullmatch(name)
    if match is None:
        raise NoMatchError(
            f"Failed to parse branch name '{name}' with pattern '{branch_regex.pattern}'",
            pattern=pattern,
            name=name,
        )

    fields = {key: value or "" for key, value in match.groupdict().items()}
    return Branch(original=name, fields=fields)
