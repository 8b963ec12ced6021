"""Rich Console factory and theme for timelane output.

Consoles render into a StringIO buffer so formatters can keep returning
plain strings. Rich drops color codes on its own when not attached to a
terminal (CliRunner, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TIMELANE_THEME = Theme(
    {
        "tl.ok": "bold green",
        "tl.error": "bold red",
        "tl.warning": "bold yellow",
        "tl.op": "bold cyan",
        "tl.key": "dim",
        "tl.id": "bold blue",
        "tl.path": "dim",
        "tl.name": "bold",
        "tl.date": "cyan",
        "tl.lane": "magenta",
        "tl.month": "dim cyan",
    }
)

# Cycled per lane so neighbouring lanes are told apart at a glance.
_LANE_STYLES = ("green", "blue", "yellow", "magenta", "cyan")


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=TIMELANE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_lane(lane: int) -> str:
    return _LANE_STYLES[lane % len(_LANE_STYLES)]
