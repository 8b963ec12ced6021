"""Command: list timeline items."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timelane.commands._base import TlCommand

if TYPE_CHECKING:
    from timelane.commands._context import AppContext


@click.command(
    cls=TlCommand,
    examples="""\
  timelane items
  timelane -q items
  timelane --json items""",
)
@click.pass_obj
def items(app: AppContext) -> None:
    """List every item, ordered by id."""
    from timelane.services.timeline import TimelineService

    app.emit(TimelineService(app.workspace).list_items())
