"""Read-oriented repository for nodes, edges, and node history."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, func, inspect, or_, select
from sqlalchemy.engine import Engine

from softgraph.infrastructure.database.schema import edge, node, node_instance

if TYPE_CHECKING:
    from sqlalchemy.sql.expression import Subquery


class GraphRepository:
    """Encapsulates SQL for read-side graph lookups.

    Returns plain row dicts. Liveness filtering that depends on node
    history is left to the service layer; the ``edges_*`` methods return
    every row the adjacency indexes hold.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def has_history(self) -> bool:
        """Whether the ``node_instance`` table exists in this database."""
        return inspect(self._engine).has_table(node_instance.name)

    def get_node(self, node_id: str) -> dict[str, Any] | None:
        """Fetch one node row by id."""
        stmt = select(node).where(node.c.id == node_id)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def get_edge(self, edge_id: str) -> dict[str, Any] | None:
        """Fetch one edge row by id."""
        stmt = select(edge).where(edge.c.id == edge_id)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def count_nodes(
        self,
        *,
        include_deleted: bool = False,
        deleted_type: int | None = None,
    ) -> int:
        """Count node rows, optionally only the live ones.

        Without *deleted_type* a node is live while ``deleted_at`` is null.
        With it, the newest ``node_instance`` row decides: a node is live
        unless that row has ``instance_type == deleted_type``. Nodes with
        no instances fall back to ``deleted_at``.
        """
        stmt = select(func.count(node.c.id))
        if not include_deleted and deleted_type is None:
            stmt = stmt.where(node.c.deleted_at.is_(None))
        elif not include_deleted:
            latest = self._latest_types_subquery()
            stmt = stmt.select_from(
                node.outerjoin(latest, latest.c.node_id == node.c.id)
            ).where(
                or_(
                    latest.c.instance_type != deleted_type,
                    and_(latest.c.instance_type.is_(None), node.c.deleted_at.is_(None)),
                )
            )
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)

    def edges_from(self, node_id: str) -> list[dict[str, Any]]:
        """All edges whose ``source`` is *node_id* (served by ``edge_source``)."""
        stmt = select(edge).where(edge.c.source == node_id).order_by(edge.c.created_at, edge.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def edges_to(self, node_id: str) -> list[dict[str, Any]]:
        """All edges whose ``target`` is *node_id* (served by ``edge_target``)."""
        stmt = select(edge).where(edge.c.target == node_id).order_by(edge.c.created_at, edge.c.id)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def edge_ids_from(self, node_id: str) -> set[str]:
        """Ids of edges leaving *node_id*."""
        return {str(row["id"]) for row in self.edges_from(node_id)}

    def edge_ids_to(self, node_id: str) -> set[str]:
        """Ids of edges entering *node_id*."""
        return {str(row["id"]) for row in self.edges_to(node_id)}

    def instances(self, node_id: str) -> list[dict[str, Any]]:
        """History of *node_id* in replay order."""
        stmt = (
            select(node_instance)
            .where(node_instance.c.node_id == node_id)
            .order_by(node_instance.c.seq)
        )
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def latest_instance(self, node_id: str) -> dict[str, Any] | None:
        """Newest instance of *node_id*, or None if it has none."""
        stmt = (
            select(node_instance)
            .where(node_instance.c.node_id == node_id)
            .order_by(node_instance.c.seq.desc())
            .limit(1)
        )
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def latest_instance_types(self, node_ids: list[str]) -> dict[str, int]:
        """Map each node id to the ``instance_type`` of its newest instance.

        Nodes without instances are absent from the result.
        """
        if not node_ids:
            return {}

        latest = self._latest_types_subquery(node_ids)
        with self._engine.connect() as conn:
            rows = conn.execute(select(latest.c.node_id, latest.c.instance_type)).fetchall()
        return {str(row.node_id): int(row.instance_type) for row in rows}

    @staticmethod
    def _latest_types_subquery(node_ids: list[str] | None = None) -> Subquery:
        """``(node_id, instance_type)`` of each node's max-``seq`` instance."""
        newest = select(
            node_instance.c.node_id,
            func.max(node_instance.c.seq).label("max_seq"),
        ).group_by(node_instance.c.node_id)
        if node_ids is not None:
            newest = newest.where(node_instance.c.node_id.in_(node_ids))
        newest_sq = newest.subquery()
        return (
            select(node_instance.c.node_id, node_instance.c.instance_type)
            .join(
                newest_sq,
                (node_instance.c.node_id == newest_sq.c.node_id)
                & (node_instance.c.seq == newest_sq.c.max_seq),
            )
            .subquery()
        )

    def get_nodes(self, node_ids: list[str]) -> dict[str, dict[str, Any]]:
        """Fetch node rows for a set of ids, keyed by id."""
        if not node_ids:
            return {}
        stmt = select(node).where(node.c.id.in_(node_ids))
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return {str(row["id"]): dict(row) for row in rows}
