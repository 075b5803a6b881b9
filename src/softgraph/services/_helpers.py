"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from softgraph.domain.lifecycle import NodeState, node_state

if TYPE_CHECKING:
    from softgraph.infrastructure.repositories.graph import GraphRepository
    from softgraph.infrastructure.store import StoreTransaction


def now_iso() -> str:
    """Current UTC time as standard ISO 8601 (for created_at/deleted_at/saved_at)."""
    return datetime.now(UTC).isoformat()


def txn_node_state(txn: StoreTransaction, row: dict[str, Any]) -> NodeState:
    """Current state of a node row, as seen inside *txn*."""
    latest = txn.latest_instance(str(row["id"]))
    return node_state(row["deleted_at"], latest["instance_type"] if latest else None)


def node_states(
    repo: GraphRepository,
    node_ids: list[str],
    *,
    history: bool,
) -> dict[str, NodeState]:
    """Batch-compute states for *node_ids*. Unknown ids are omitted."""
    rows = repo.get_nodes(node_ids)
    latest = repo.latest_instance_types(list(rows)) if history else {}
    return {
        node_id: node_state(row["deleted_at"], latest.get(node_id))
        for node_id, row in rows.items()
    }


def annotate_edges(
    repo: GraphRepository,
    rows: list[dict[str, Any]],
    *,
    history: bool,
) -> list[dict[str, Any]]:
    """Attach a derived ``live`` flag to edge rows.

    An edge is live when its own ``deleted_at`` is null and both of its
    endpoints are live. Deleting a node never writes to its edges, so
    this is where the node's deletion shows up on them.
    """
    endpoint_ids = sorted({str(r["source"]) for r in rows} | {str(r["target"]) for r in rows})
    states = node_states(repo, endpoint_ids, history=history)
    annotated: list[dict[str, Any]] = []
    for row in rows:
        live = (
            row["deleted_at"] is None
            and states.get(str(row["source"])) is NodeState.LIVE
            and states.get(str(row["target"])) is NodeState.LIVE
        )
        annotated.append({**row, "live": live})
    return annotated
