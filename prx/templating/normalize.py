"""Token normalization for generated branch names."""

from typing import Iterable


def remove_consecutive_duplicates(text: str, chars: Iterable[str]) -> str:
    """Collapse runs of the same separator character into a single one.

    Only identical adjacent characters are collapsed: "a--b" becomes "a-b"
    but "a-_b" is left alone. Characters outside ``chars`` are never touched.

    Args:
        text: The text to collapse.
        chars: Single-character separators.

    Returns:
        The collapsed text.
    """
    separators = set(chars)
    result = []
    last = ""

    for char in text:
        if char in separators and char == last:
            continue
        result.append(char)
        last = char

    return "".join(result)


def normalize_branch_name(name: str, token_separators: Iterable[str]) -> str:
    """Normalize a rendered branch name.

    Args:
        name: The rendered (or hand-edited) branch name.
        token_separators: Configured token separators, including "/".

    Returns:
        The name with duplicate separators collapsed and surrounding
        dashes and newlines removed.
    """
    name = remove_consecutive_duplicates(name, token_separators)
    return name.strip("-\n")
