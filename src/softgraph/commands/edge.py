"""Command group: directed edges."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from softgraph.commands._base import SgGroup
from softgraph.services.edges import EdgeService

if TYPE_CHECKING:
    from softgraph.commands._context import AppContext

_EDGE_EXAMPLES = """\
  softgraph edge create n1 n2
  softgraph edge create n1 n2 --id e1
  softgraph edge delete e1
  softgraph edge disconnect n1 n2
  softgraph edge show e1
  softgraph edge list n1
  softgraph edge list n2 --incoming --all
  softgraph edge check n1 n2"""


@click.group(cls=SgGroup, examples=_EDGE_EXAMPLES)
@click.pass_obj
def edge(app: AppContext) -> None:
    """Connect and disconnect nodes."""


@edge.command(
    examples="""\
  softgraph edge create n1 n2
  softgraph edge create n1 n2 --id e1"""
)
@click.argument("source")
@click.argument("target")
@click.option("--id", "edge_id", default=None, help="Use this id instead of a generated one.")
@click.pass_obj
def create(app: AppContext, source: str, target: str, edge_id: str | None) -> None:
    """Create an edge SOURCE -> TARGET."""
    app.emit(EdgeService(app.store).create_edge(source, target, edge_id=edge_id))


@edge.command(
    examples="""\
  softgraph edge delete e1"""
)
@click.argument("edge_id")
@click.pass_obj
def delete(app: AppContext, edge_id: str) -> None:
    """Soft-delete an edge by id."""
    app.emit(EdgeService(app.store).delete_edge(edge_id))


@edge.command(
    examples="""\
  softgraph edge disconnect n1 n2"""
)
@click.argument("source")
@click.argument("target")
@click.pass_obj
def disconnect(app: AppContext, source: str, target: str) -> None:
    """Soft-delete the live edge SOURCE -> TARGET."""
    app.emit(EdgeService(app.store).disconnect(source, target))


@edge.command(
    examples="""\
  softgraph edge show e1"""
)
@click.argument("edge_id")
@click.pass_obj
def show(app: AppContext, edge_id: str) -> None:
    """Show one edge."""
    app.emit(EdgeService(app.store).get_edge(edge_id))


@edge.command(
    "list",
    examples="""\
  softgraph edge list n1
  softgraph edge list n2 --incoming
  softgraph --json edge list n1 --all""",
)
@click.argument("node_id")
@click.option("--incoming", is_flag=True, help="Edges entering NODE_ID instead of leaving it.")
@click.option("--all", "include_deleted", is_flag=True, help="Include edges that are not live.")
@click.pass_obj
def list_edges(app: AppContext, node_id: str, incoming: bool, include_deleted: bool) -> None:
    """List edges adjacent to NODE_ID."""
    svc = EdgeService(app.store)
    if incoming:
        app.emit(svc.incoming(node_id, include_deleted=include_deleted))
    else:
        app.emit(svc.outgoing(node_id, include_deleted=include_deleted))


@edge.command(
    examples="""\
  softgraph edge check n1 n2"""
)
@click.argument("source")
@click.argument("target")
@click.pass_obj
def check(app: AppContext, source: str, target: str) -> None:
    """Report whether SOURCE -> TARGET is connected by a live edge."""
    app.emit(EdgeService(app.store).is_connected(source, target))
