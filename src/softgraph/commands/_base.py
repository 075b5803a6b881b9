"""Click command classes that carry copy-pasteable usage examples.

Every ``node``/``edge`` subcommand is declared with an ``examples=``
block. ``softgraph edge list --examples`` prints that block and exits
without opening the database.
"""

from __future__ import annotations

from typing import Any

import click


def _examples_option(examples: str) -> click.Option:
    """Eager ``--examples`` flag that prints *examples* and stops."""

    def _print(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_print,
        help="Show usage examples.",
    )


class SgCommand(click.Command):
    """Command accepting ``examples=`` (see module docstring)."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))


class SgGroup(click.Group):
    """Group accepting ``examples=``; its subcommands default to :class:`SgCommand`."""

    command_class = SgCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(_examples_option(examples))
