"""Command: create (or open) the graph database."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from softgraph.commands._base import SgCommand

if TYPE_CHECKING:
    from softgraph.commands._context import AppContext


@click.command(
    "init",
    cls=SgCommand,
    examples="""\
  softgraph init
  softgraph --root ./graph init
  softgraph --json init""",
)
@click.pass_obj
def init_cmd(app: AppContext) -> None:
    """Create the database and tables (idempotent)."""
    from softgraph.services.init import InitService

    app.emit(InitService(app.store).init())
