"""EdgeService — directed edges between nodes.

Edges are soft-deleted like nodes. Node deletion does not cascade: an
edge whose endpoint is deleted keeps its own ``deleted_at`` null and is
simply reported as not live until the endpoint is restored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from sqlalchemy.exc import IntegrityError

from softgraph.domain.ids import generate_id, validate_id
from softgraph.domain.lifecycle import NodeState
from softgraph.services._helpers import annotate_edges, node_states, now_iso, txn_node_state
from softgraph.services.base import BaseService
from softgraph.services.result import ServiceResult

logger = logging.getLogger(__name__)


class EdgeService(BaseService):
    """Connect, disconnect, and look up edges."""

    def create_edge(
        self,
        source: str,
        target: str,
        *,
        edge_id: str | None = None,
    ) -> ServiceResult:
        """Insert a live edge ``source -> target``.

        Missing endpoints are rejected by the engine's foreign keys.
        Deleted endpoints are rejected unless
        ``[graph] allow_deleted_endpoints`` is set.
        """
        op = "create_edge"
        allow_deleted = self._store.settings.graph.allow_deleted_endpoints

        edge_id = edge_id or generate_id()
        if not validate_id(edge_id):
            return self._fail(op, "INVALID_ID", f"Invalid edge id: {edge_id!r}", {"id": edge_id})

        now = now_iso()
        try:
            with self._store.transaction() as txn:
                if not allow_deleted:
                    for endpoint in (source, target):
                        row = txn.get_node(endpoint)
                        if row is not None and txn_node_state(txn, row) is NodeState.DELETED:
                            return self._fail(
                                op,
                                "NODE_DELETED",
                                f"Cannot connect deleted node: {endpoint}",
                                {"id": endpoint},
                            )
                existing = txn.find_live_edge(source, target)
                if existing is not None:
                    return self._fail(
                        op,
                        "EDGE_EXISTS",
                        f"Edge {source} -> {target} already exists",
                        {"existing_id": existing["id"]},
                    )
                txn.insert_edge(edge_id, source, target, now)
        except IntegrityError as exc:
            return self._integrity_failure(
                op, exc, {"id": edge_id, "source": source, "target": target}
            )

        logger.debug("Created edge %s: %s -> %s", edge_id, source, target)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": edge_id,
                "source": source,
                "target": target,
                "created_at": now,
                "deleted_at": None,
            },
        )

    def delete_edge(self, edge_id: str) -> ServiceResult:
        """Soft-delete one edge by id."""
        op = "delete_edge"
        with self._store.transaction() as txn:
            row = txn.get_edge(edge_id)
            if row is None:
                return self._not_found(op, edge_id)
            if row["deleted_at"] is not None:
                return self._fail(
                    op,
                    "ALREADY_DELETED",
                    f"Edge is already deleted: {edge_id}",
                    {"id": edge_id, "deleted_at": row["deleted_at"]},
                )
            now = now_iso()
            txn.soft_delete_edge(edge_id, now)

        logger.debug("Soft-deleted edge %s", edge_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": edge_id,
                "source": row["source"],
                "target": row["target"],
                "deleted_at": now,
            },
        )

    def disconnect(self, source: str, target: str) -> ServiceResult:
        """Soft-delete the live edge ``source -> target``."""
        op = "disconnect"
        with self._store.transaction() as txn:
            row = txn.find_live_edge(source, target)
            if row is None:
                return self._fail(
                    op,
                    "EDGE_NOT_FOUND",
                    f"No edge {source} -> {target}",
                    {"source": source, "target": target},
                )
            now = now_iso()
            txn.soft_delete_edge(str(row["id"]), now)

        logger.debug("Disconnected %s -> %s (edge %s)", source, target, row["id"])
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": row["id"], "source": source, "target": target, "deleted_at": now},
        )

    def is_connected(self, source: str, target: str) -> ServiceResult:
        """Whether a live edge ``source -> target`` exists between live nodes."""
        op = "is_connected"
        rows = [r for r in self._repo.edges_from(source) if r["target"] == target]
        live = [
            r
            for r in annotate_edges(self._repo, rows, history=self._store.history_enabled)
            if r["live"]
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "source": source,
                "target": target,
                "connected": bool(live),
                "edge_id": live[0]["id"] if live else None,
            },
        )

    def get_edge(self, edge_id: str) -> ServiceResult:
        """Edge row plus its derived ``live`` flag."""
        op = "get_edge"
        row = self._repo.get_edge(edge_id)
        if row is None:
            return self._not_found(op, edge_id)
        (annotated,) = annotate_edges(self._repo, [row], history=self._store.history_enabled)
        return ServiceResult(ok=True, op=op, data=annotated)

    def outgoing(self, node_id: str, *, include_deleted: bool = False) -> ServiceResult:
        """Edges leaving *node_id*; live ones only unless *include_deleted*."""
        return self._adjacent("outgoing", node_id, self._repo.edges_from, include_deleted)

    def incoming(self, node_id: str, *, include_deleted: bool = False) -> ServiceResult:
        """Edges entering *node_id*; live ones only unless *include_deleted*."""
        return self._adjacent("incoming", node_id, self._repo.edges_to, include_deleted)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _adjacent(
        self,
        op: str,
        node_id: str,
        fetch: Callable[[str], list[dict[str, Any]]],
        include_deleted: bool,
    ) -> ServiceResult:
        history = self._store.history_enabled
        if not node_states(self._repo, [node_id], history=history):
            return self._fail(op, "NOT_FOUND", f"No node with id: {node_id}", {"id": node_id})

        items = annotate_edges(self._repo, fetch(node_id), history=history)
        if not include_deleted:
            items = [item for item in items if item["live"]]
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": node_id, "items": items, "count": len(items)},
        )

    def _not_found(self, op: str, edge_id: str) -> ServiceResult:
        return self._fail(op, "NOT_FOUND", f"No edge with id: {edge_id}", {"id": edge_id})
