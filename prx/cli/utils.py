"""Shared utility functions for CLI commands."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from prx import global_config
from prx.exceptions import PrxError
from prx.gh import GitHubCLIError
from prx.git import GitError, get_repo_root
from prx.llm import LLMError, MissingAPIKeyError
from prx.settings import RepositoryConfig, load_repository_config

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# Third-party loggers that report every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(debug: bool = False) -> None:
    """Configure the root logger: INFO by default, DEBUG with --debug."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Print prx errors to stderr and exit with code 1."""
    try:
        yield
    except MissingAPIKeyError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)
    except GitHubCLIError as e:
        typer.echo(f"GitHub CLI error: {e}", err=True)
        raise typer.Exit(1)
    except LLMError as e:
        typer.echo(f"LLM error: {e}", err=True)
        raise typer.Exit(1)
    except PrxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def load_repository(repo_root: Optional[Path] = None) -> tuple[Path, RepositoryConfig]:
    """Load the configuration of the current repository.

    The ``global`` section of the setup config is merged under the repository file.

    Returns:
        The repository root and its configuration.
    """
    repo_root = repo_root or get_repo_root()
    config = load_repository_config(repo_root, global_config.get_global_repository_config())
    return repo_root, config


def split_list_option(values: Optional[list[str]]) -> list[str]:
    """Flatten repeated and comma-separated option values ("-r a,b -r c")."""
    result = []
    for value in values or []:
        result.extend(part.strip() for part in value.split(",") if part.strip())
    return result
