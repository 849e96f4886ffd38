"""Interactive confirmation before a request is submitted."""
from typing import List, Optional, TextIO

import typer

PROMPT = "Please type the name again(separate with white space when more than one)"


def confirm(names: List[str], in_stream: Optional[TextIO] = None) -> bool:
    """Ask the user to type ``names`` again; True only on an exact match."""
    if in_stream is None:
        entered = typer.prompt(PROMPT, default="", show_default=False)
    else:
        typer.echo(f"{PROMPT}: ", nl=False)
        entered = in_stream.readline()
    if entered.split() != list(names):
        typer.secho(f"typed \"{entered.strip()}\" does not match \"{' '.join(names)}\"", err=True, fg="yellow")
        return False
    return True
