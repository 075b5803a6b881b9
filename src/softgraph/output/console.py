"""Buffered Rich consoles for rendering results to a string.

Renderers draw into a Console whose file is a ``StringIO``; the caller
takes the text and decides whether it goes to stdout or stderr. Rich
drops colour codes by itself when the real stream is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SOFTGRAPH_THEME = Theme(
    {
        "sg.ok": "bold green",
        "sg.error": "bold red",
        "sg.op": "bold cyan",
        "sg.key": "dim",
        "sg.id": "bold blue",
        "sg.live": "green",
        "sg.deleted": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Console writing into a fresh buffer; 120 columns unless *width* is given."""
    return Console(
        file=StringIO(),
        theme=SOFTGRAPH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Everything rendered into *console* so far."""
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()


def style_for_state(live: bool) -> str:
    """Theme style for a node or edge state cell."""
    return "sg.live" if live else "sg.deleted"
