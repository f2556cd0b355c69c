# teamctl/cli/common/utils.py

from typing import List, Optional

import questionary
import typer


def color_info(text: str) -> str:
    return typer.style(text, fg=typer.colors.CYAN)


def pick_name(names: List[str], message: str) -> Optional[str]:
    """
    Asks the user to pick one of `names`.

    Returns None when there is nothing to pick or the prompt was cancelled.
    A single candidate is picked without prompting.
    """
    if not names:
        return None
    if len(names) == 1:
        return names[0]
    return questionary.select(message, choices=names).ask()


def fail(message: str):
    typer.secho(f"Error: {message}", fg=typer.colors.RED)
    raise typer.Exit(code=1)
