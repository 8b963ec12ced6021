"""Command: rename an item."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timelane.commands._base import TlCommand

if TYPE_CHECKING:
    from timelane.commands._context import AppContext


@click.command(
    cls=TlCommand,
    examples="""\
  timelane rename 2 "Design review"
  timelane --json rename 5 Launch""",
)
@click.argument("item_id", type=int)
@click.argument("name")
@click.pass_obj
def rename(app: AppContext, item_id: int, name: str) -> None:
    """Set the name of ITEM_ID. Empty names are allowed."""
    from timelane.services.timeline import TimelineService

    app.emit(TimelineService(app.workspace).rename(item_id, name))
