"""Command: workspace initialization (named init_cmd to avoid shadowing builtins)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from timelane.commands._base import TlCommand

if TYPE_CHECKING:
    from timelane.commands._context import AppContext

_INIT_EXAMPLES = """\
  timelane init
  timelane init --seed items.json
  timelane -c ~/plans/timelane.toml init"""


@click.command("init", cls=TlCommand, examples=_INIT_EXAMPLES)
@click.option(
    "--seed",
    "seed_file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON array of items to load.",
)
@click.pass_obj
def init_cmd(app: AppContext, seed_file: str | None) -> None:
    """Create the timeline database in the workspace directory.

    Running it again is safe; --seed then inserts or replaces items by id.
    """
    from timelane.services.timeline import TimelineService

    records = app.read_json_list(seed_file, "init") if seed_file else None
    app.emit(TimelineService(app.workspace).init(records))
