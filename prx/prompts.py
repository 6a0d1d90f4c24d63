"""Interactive terminal prompts.

Contains:
- select: Numbered single-choice prompt
- confirm: Yes/no prompt
- ask: Free-text prompt
- ask_required: Free-text prompt that re-prompts on empty answers
- find_editor: Locate the user's text editor
- edit_string: Open text in an editor and return the edited text

Cancelling any prompt (Ctrl-C, EOF) raises InteractionError.
"""

import os
import shutil
import subprocess
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Sequence

import click
import typer

from prx.exceptions import InteractionError


@contextmanager
def _interaction() -> Iterator[None]:
    try:
        yield
    except (click.Abort, EOFError, KeyboardInterrupt) as e:
        raise InteractionError("Prompt cancelled") from e


def select(message: str, options: Sequence[str], default: int = 1) -> str:
    """Ask the user to pick one of the options.

    Args:
        message: The question to display.
        options: The options, shown as a numbered list.
        default: 1-based index of the default option.

    Returns:
        The chosen option.
    """
    if not options:
        raise InteractionError(f"No options to choose from for: {message}")

    typer.echo(message, err=True)
    for i, option in enumerate(options, 1):
        typer.echo(f"  {i}. {option}", err=True)

    with _interaction():
        choice = typer.prompt(
            f"Select an option (1-{len(options)})",
            type=click.IntRange(1, len(options)),
            default=default,
            err=True,
        )

    return options[choice - 1]


def confirm(message: str, default: bool = False) -> bool:
    """Ask a yes/no question."""
    with _interaction():
        return typer.confirm(message, default=default, err=True)


def ask(message: str, default: str = "") -> str:
    """Ask for free text. An empty answer is allowed."""
    with _interaction():
        return typer.prompt(message, default=default, show_default=False, err=True)


def ask_required(message: str) -> str:
    """Ask for free text, re-prompting until the answer is not blank."""
    while True:
        answer = ask(message).strip()
        if answer:
            return answer
        typer.echo("A value is required.", err=True)


def find_editor(preferred: Optional[str] = None) -> list[str]:
    """Find an available text editor.

    Preference order:
    1. The editor configured in the setup config
    2. $VISUAL / $EDITOR environment variables
    3. nano if available
    4. vi as last resort

    Returns:
        List of command parts to run the editor.
    """
    if preferred:
        return preferred.split()

    for env_var in ("VISUAL", "EDITOR"):
        editor = os.environ.get(env_var)
        if editor:
            return editor.split()

    if shutil.which("nano"):
        return ["nano"]

    return ["vi"]


def edit_string(text: str, editor: Optional[str] = None) -> str:
    """Open ``text`` in an editor and return what the user saved.

    Args:
        text: The initial content.
        editor: Editor command overriding the lookup in find_editor.

    Returns:
        The edited content.

    Raises:
        InteractionError: If the editor cannot be started or fails.
    """
    editor_cmd = find_editor(editor)

    with tempfile.NamedTemporaryFile("w", suffix=".txt", prefix="prx-edit-", delete=False) as f:
        f.write(text)
        tmp_path = Path(f.name)

    try:
        result = subprocess.run(editor_cmd + [str(tmp_path)], check=False)
        if result.returncode != 0:
            raise InteractionError(
                f"Editor '{' '.join(editor_cmd)}' exited with code {result.returncode}")
        return tmp_path.read_text()
    except FileNotFoundError as e:
        raise InteractionError(f"Editor not found: {editor_cmd[0]}") from e
    finally:
        tmp_path.unlink(missing_ok=True)
