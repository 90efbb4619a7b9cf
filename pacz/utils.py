import os
from pathlib import Path

import typer


CLEAR_SCREEN = "\033[H\033[2J"


def clear_screen() -> None:
    # color=True keeps click from stripping the sequence off non-tty streams
    typer.echo(CLEAR_SCREEN, nl=False, color=True)


def same_path(a: str, b: str) -> bool:
    return Path(os.path.abspath(a)) == Path(os.path.abspath(b))


def is_within(child: str, parent: str) -> bool:
    try:
        Path(os.path.abspath(child)).relative_to(os.path.abspath(parent))
        return True
    except ValueError:
        return False
