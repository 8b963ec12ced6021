"""Click classes shared by every timelane command.

``TlCommand`` and ``TlGroup`` take an ``examples`` string, add an eager
``--examples`` flag that prints it, and point to that flag from the
help epilog. ``TlGroup`` lists subcommands in registration order, which
follows the usual workflow (init, seed, inspect, edit, replay) rather
than the alphabet.
"""

from __future__ import annotations

from typing import Any

import click

EXAMPLES_HINT = "Run with --examples for usage examples."


def _attach_examples(cmd: click.Command, examples: str | None) -> None:
    if not examples:
        return

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )
    if cmd.epilog is None:
        cmd.epilog = EXAMPLES_HINT


class TlCommand(click.Command):
    """Command with an optional ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        _attach_examples(self, examples)


class TlGroup(click.Group):
    """Group whose subcommands default to :class:`TlCommand`."""

    command_class = TlCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        _attach_examples(self, examples)

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)
