"""Command: replay a scripted stream of input events."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timelane.commands._base import TlCommand

_REPLAY_EXAMPLES = """\
  timelane replay session.json
  timelane --json replay session.json --zoom 2

  session.json:
    [{"type": "pointer_down", "item": 3, "handle": "end", "x": 0},
     {"type": "pointer_move", "x": 72},
     {"type": "pointer_up"},
     {"type": "begin_rename", "item": 1},
     {"type": "text", "text": "Kickoff"},
     {"type": "key", "key": "Enter"}]"""

if TYPE_CHECKING:
    from timelane.commands._context import AppContext


@click.command(cls=TlCommand, examples=_REPLAY_EXAMPLES)
@click.argument("script", type=click.Path(exists=True, dir_okay=False))
@click.option("--zoom", type=float, default=None, help="Starting zoom factor.")
@click.pass_obj
def replay(app: AppContext, script: str, zoom: float | None) -> None:
    """Feed the events in SCRIPT through one editing session.

    Event types: pointer_down, pointer_move, pointer_up, cancel, zoom,
    begin_rename, text, key, blur. Commits are saved as they happen.
    """
    from timelane.services.timeline import TimelineService

    raw = app.read_json_list(script, "replay")
    app.emit(TimelineService(app.workspace).replay(raw, zoom=zoom))
