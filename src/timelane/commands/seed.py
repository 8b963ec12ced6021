"""Command: load items into an existing workspace."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timelane.commands._base import TlCommand

if TYPE_CHECKING:
    from timelane.commands._context import AppContext


@click.command(
    cls=TlCommand,
    examples="""\
  timelane seed items.json
  timelane --json seed more-items.json""",
)
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def seed(app: AppContext, file: str) -> None:
    """Insert or replace items from a JSON file.

    FILE must contain a JSON array of objects with "id", "name", "start"
    and "end" keys (dates as YYYY-MM-DD). One bad record aborts the load.
    """
    from timelane.services.timeline import TimelineService

    app.emit(TimelineService(app.workspace).seed(app.read_json_list(file, "seed")))
