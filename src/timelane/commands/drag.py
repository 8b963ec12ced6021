"""Command: drag an item's handle (resize or move)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timelane.commands._base import TlCommand

if TYPE_CHECKING:
    from timelane.commands._context import AppContext


@click.command(
    cls=TlCommand,
    examples="""\
  timelane drag 3 --handle end --days 3
  timelane drag 3 --handle start --days -2
  timelane drag 3 --pixels 96 --zoom 2
  timelane --json drag 1 --handle body --days 7""",
)
@click.argument("item_id", type=int)
@click.option(
    "--handle",
    type=click.Choice(["start", "end", "body"], case_sensitive=False),
    default="body",
    show_default=True,
    help="start/end resize one edge, body moves the whole item.",
)
@click.option("--pixels", type=float, default=None, help="Pointer travel in pixels.")
@click.option("--days", type=int, default=None, help="Travel in whole days.")
@click.option("--zoom", type=float, default=None, help="Zoom factor the pixels are measured at.")
@click.pass_obj
def drag(
    app: AppContext,
    item_id: int,
    handle: str,
    pixels: float | None,
    days: int | None,
    zoom: float | None,
) -> None:
    """Drag ITEM_ID by a handle, as a pointer would.

    Exactly one of --pixels or --days is required. A resize that would
    put the start after the end leaves the item unchanged.
    """
    from timelane.services.timeline import TimelineService

    app.emit(
        TimelineService(app.workspace).drag(
            item_id, handle.lower(), pixels=pixels, days=days, zoom=zoom
        )
    )
