"""Subcommand modules for timelane.

register_commands() imports them lazily so ``timelane --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register every subcommand on the root CLI group."""
    from timelane.commands.drag import drag
    from timelane.commands.init_cmd import init_cmd
    from timelane.commands.items import items
    from timelane.commands.lanes import lanes
    from timelane.commands.rename import rename
    from timelane.commands.replay import replay
    from timelane.commands.seed import seed

    cli.add_command(init_cmd)
    cli.add_command(seed)
    cli.add_command(items)
    cli.add_command(lanes)
    cli.add_command(drag)
    cli.add_command(rename)
    cli.add_command(replay)
