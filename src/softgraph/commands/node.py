"""Command group: node lifecycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from softgraph.commands._base import SgGroup
from softgraph.services.nodes import NodeService

if TYPE_CHECKING:
    from softgraph.commands._context import AppContext

_NODE_EXAMPLES = """\
  softgraph node create '{"title": "first"}'
  softgraph node create v1 --id n1
  softgraph node update n1 v2
  softgraph node delete n1
  softgraph node restore n1
  softgraph node show n1
  softgraph node history n1"""


@click.group(cls=SgGroup, examples=_NODE_EXAMPLES)
@click.pass_obj
def node(app: AppContext) -> None:
    """Create, change, and soft-delete nodes."""


@node.command(
    examples="""\
  softgraph node create v1
  softgraph node create v1 --id n1
  softgraph --json node create '{"k": 1}'"""
)
@click.argument("value", required=False)
@click.option("--id", "node_id", default=None, help="Use this id instead of a generated one.")
@click.pass_obj
def create(app: AppContext, value: str | None, node_id: str | None) -> None:
    """Create a node holding VALUE."""
    app.emit(NodeService(app.store).create_node(value, node_id=node_id))


@node.command(
    examples="""\
  softgraph node update n1 v2"""
)
@click.argument("node_id")
@click.argument("value")
@click.pass_obj
def update(app: AppContext, node_id: str, value: str) -> None:
    """Record a new VALUE for a live node."""
    app.emit(NodeService(app.store).update_node(node_id, value))


@node.command(
    examples="""\
  softgraph node delete n1"""
)
@click.argument("node_id")
@click.pass_obj
def delete(app: AppContext, node_id: str) -> None:
    """Soft-delete a node (its edges and history are kept)."""
    app.emit(NodeService(app.store).delete_node(node_id))


@node.command(
    examples="""\
  softgraph node restore n1"""
)
@click.argument("node_id")
@click.pass_obj
def restore(app: AppContext, node_id: str) -> None:
    """Restore a soft-deleted node."""
    app.emit(NodeService(app.store).restore_node(node_id))


@node.command(
    examples="""\
  softgraph node show n1
  softgraph --json node show n1"""
)
@click.argument("node_id")
@click.pass_obj
def show(app: AppContext, node_id: str) -> None:
    """Show a node with its state, value, and live degree."""
    app.emit(NodeService(app.store).get_node(node_id))


@node.command(
    examples="""\
  softgraph node history n1
  softgraph -v node history n1"""
)
@click.argument("node_id")
@click.pass_obj
def history(app: AppContext, node_id: str) -> None:
    """List a node's recorded instances in order."""
    app.emit(NodeService(app.store).history(node_id))
