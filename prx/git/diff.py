"""Git diff utilities for summarizing a branch.

Contains:
- MIN_CHANGED_LINES: Files with fewer changed lines are left out of the summary diff
- parse_diff_stat: Parse `git diff --stat` output into (path, changed lines) pairs
- get_changed_files: Files changed against a base with more than MIN_CHANGED_LINES changes
- get_word_diff: Whitespace-insensitive word diff of files against a base
- get_summary_diff: The diff used to summarize a branch
"""

import re

from prx.git.runner import _run_git_command

MIN_CHANGED_LINES = 10

# " path/to/file.py | 12 +++---" (binary files show "Bin" instead of a count)
_STAT_LINE = re.compile(r"^\s*(?P<path>.+?)\s+\|\s+(?P<count>\d+)")


def parse_diff_stat(output: str) -> list[tuple[str, int]]:
    """Parse `git diff --stat` output.

    Args:
        output: The output of git diff --stat.

    Returns:
        (path, changed lines) pairs; the summary line and binary files are skipped.
    """
    files = []
    for line in output.splitlines():
        match = _STAT_LINE.match(line)
        if match:
            files.append((match.group("path"), int(match.group("count"))))
    return files


def get_changed_files(base: str, min_changed_lines: int = MIN_CHANGED_LINES) -> list[str]:
    """Get the files changed against ``base`` with more than ``min_changed_lines`` changes."""
    output = _run_git_command(["diff", base, "--stat=10000"])
    return [path for path, count in parse_diff_stat(output) if count > min_changed_lines]


def get_word_diff(base: str, files: list[str]) -> str:
    """Get a compact diff of ``files`` against ``base``.

    Whitespace and blank-line changes are ignored, no context lines are
    included and changes are shown word by word.
    """
    if not files:
        return ""
    return _run_git_command([
        "diff",
        base,
        "--ignore-all-space",
        "--ignore-blank-lines",
        "--ignore-space-change",
        "--unified=0",
        "--word-diff",
        "--",
    ] + files)


def get_summary_diff(base: str) -> str:
    """Get the diff used to summarize the changes of the current branch against ``base``."""
    return get_word_diff(base, get_changed_files(base))
