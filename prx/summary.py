"""AI-powered pull request summaries.

Contains:
- build_ai_summarizer: Build the AISummary callback used by the pull request templater
"""

import logging
import time
from typing import Callable, Optional, Sequence

from prx import config as _config
from prx import llm
from prx.git import get_summary_diff
from prx.llm import LLMError, LLMTimeoutError

logger = logging.getLogger(__name__)


def build_ai_summarizer(
    base: str,
    pr_body: str,
    commits_fetcher: Callable[[], Sequence[str]],
    enabled: bool = True,
    timeout: Optional[float] = None,
    diff_fetcher: Callable[[str], str] = get_summary_diff,
) -> Callable[[], str]:
    """Build the callback that summarizes the branch changes.

    The callback returns "" when summaries are disabled or no API key is
    configured for the active provider. Otherwise it summarizes the diff
    against ``base``; if that fails it tries once more with the commit
    subjects. Both attempts share ``timeout``; running out of time yields ""
    with a warning.

    Args:
        base: The base branch of the pull request.
        pr_body: The pull request body template the summary should follow.
        commits_fetcher: Callback returning the commit subjects of the branch.
        enabled: False when summaries were turned off (--no-ai-summary).
        timeout: Seconds for the whole summary. Defaults to the configured timeout.
        diff_fetcher: Returns the diff to summarize for a base branch.

    Returns:
        A zero-argument callback returning the summary.
    """

    def summarize() -> str:
        if not enabled:
            logger.debug("AI-powered summary is disabled")
            return ""

        provider = llm.get_provider()
        if not provider.has_api_key():
            logger.debug("AI-powered summary is disabled: no API key for %s", provider.provider_name)
            return ""

        deadline = time.monotonic() + (_config.TIMEOUT if timeout is None else timeout)

        def remaining() -> float:
            left = deadline - time.monotonic()
            if left <= 0:
                raise LLMTimeoutError("AI-powered summary timed out")
            return left

        try:
            diff = diff_fetcher(base)
            try:
                result = provider.summarize(diff, pr_body, timeout=remaining())
            except LLMTimeoutError:
                raise
            except LLMError as e:
                logger.debug("Failed to summarize git diff output (%s), falling back to commits", e)
                commits = "\n".join(commits_fetcher())
                result = provider.summarize(commits, pr_body, timeout=remaining())
        except LLMTimeoutError:
            logger.warning("AI-powered summary timed out, skipping")
            return ""

        logger.debug(
            "AI summary by %s (%d input tokens, %d output tokens)",
            result.model, result.input_tokens, result.output_tokens,
        )
        return result.summary.strip()

    return summarize
