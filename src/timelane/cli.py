"""Entry point for the ``timelane`` command.

The root group turns global flags into :class:`TimelaneSettings`, builds
the :class:`AppContext` every subcommand receives, and closes the
workspace store when the command finishes.
"""

from __future__ import annotations

from pathlib import Path

import click

from timelane import __version__
from timelane.commands import register_commands
from timelane.commands._base import TlGroup
from timelane.commands._context import AppContext
from timelane.config.settings import TimelaneSettings


@click.group(
    cls=TlGroup,
    invoke_without_command=True,
    examples="""\
  timelane init --seed items.json
  timelane lanes --zoom 1.5
  timelane drag 2 --handle end --days 3
  timelane --root ~/plans --json items
  TIMELANE_RECONCILE__POLICY=merge timelane replay script.json""",
)
@click.version_option(version=__version__, prog_name="timelane")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Ids only; log errors only.")
@click.option("-v", "--verbose", is_flag=True, help="Detail tables and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Path to a timelane.toml.")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Workspace directory (default: the config file's directory, else the CWD).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    root: Path | None,
) -> None:
    """timelane: pack date ranges into lanes and edit them."""
    settings = TimelaneSettings.from_cli(
        config_path=config_path,
        root=root,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
