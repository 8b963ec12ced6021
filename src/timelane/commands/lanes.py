"""Command: show the lane layout."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timelane.commands._base import TlCommand

if TYPE_CHECKING:
    from timelane.commands._context import AppContext


@click.command(
    cls=TlCommand,
    examples="""\
  timelane lanes
  timelane lanes --zoom 2
  timelane -v lanes
  timelane --json lanes --zoom 0.5""",
)
@click.option(
    "--zoom", type=float, default=None, help="Zoom factor, clamped to the configured range."
)
@click.pass_obj
def lanes(app: AppContext, zoom: float | None) -> None:
    """Pack items into lanes and draw them with a month ruler."""
    from timelane.services.timeline import TimelineService

    app.emit(TimelineService(app.workspace).layout(zoom=zoom))
