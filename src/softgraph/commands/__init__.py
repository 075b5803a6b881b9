"""softgraph subcommands.

The ``node`` and ``edge`` groups plus the standalone ``init`` command.
Modules are imported inside :func:`register_commands` so that importing
``softgraph.cli`` does not pull in the services layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach every subcommand to the root group."""
    from softgraph.commands.edge import edge
    from softgraph.commands.init_cmd import init_cmd
    from softgraph.commands.node import node

    for command in (node, edge, init_cmd):
        cli.add_command(command)
