"""GraphStore — owner of the engine and the transaction boundary.

The store is the single dependency injected into every service. Writes
go through :meth:`GraphStore.transaction`, which yields a
:class:`StoreTransaction` bound to one ``engine.begin()`` block: the
block commits when it exits normally and rolls back on any exception.

The write primitives here are the raw schema contract. They propagate
``IntegrityError`` untouched and apply no policy beyond the
``deleted_at`` invariant (set once, never cleared); deciding whether an
operation is allowed is the service layer's job.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, insert, select, update

from softgraph.infrastructure.database.engine import database_path, init_database
from softgraph.infrastructure.database.schema import edge, node, node_instance

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from softgraph.config.settings import SoftgraphSettings

logger = logging.getLogger(__name__)


@dataclass
class StoreTransaction:
    """Active transaction with the graph write primitives."""

    conn: Connection
    history: bool = True

    # ------------------------------------------------------------------
    # Reads (inside the transaction, so they see pending writes)
    # ------------------------------------------------------------------

    def get_node(self, node_id: str) -> dict[str, Any] | None:
        row = self.conn.execute(select(node).where(node.c.id == node_id)).mappings().first()
        return dict(row) if row is not None else None

    def get_edge(self, edge_id: str) -> dict[str, Any] | None:
        row = self.conn.execute(select(edge).where(edge.c.id == edge_id)).mappings().first()
        return dict(row) if row is not None else None

    def latest_instance(self, node_id: str) -> dict[str, Any] | None:
        """Newest instance of *node_id*, or None (also None without history)."""
        if not self.history:
            return None
        row = (
            self.conn.execute(
                select(node_instance)
                .where(node_instance.c.node_id == node_id)
                .order_by(node_instance.c.seq.desc())
                .limit(1)
            )
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    def find_live_edge(self, source: str, target: str) -> dict[str, Any] | None:
        """First edge ``source -> target`` whose own ``deleted_at`` is null."""
        row = (
            self.conn.execute(
                select(edge)
                .where(
                    edge.c.source == source,
                    edge.c.target == target,
                    edge.c.deleted_at.is_(None),
                )
                .order_by(edge.c.created_at)
                .limit(1)
            )
            .mappings()
            .first()
        )
        return dict(row) if row is not None else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert_node(self, node_id: str, created_at: str) -> None:
        """Insert a live node. Duplicate ids raise ``IntegrityError``."""
        self.conn.execute(insert(node).values(id=node_id, created_at=created_at, deleted_at=None))

    def insert_edge(self, edge_id: str, source: str, target: str, created_at: str) -> None:
        """Insert a live edge. Missing endpoints raise ``IntegrityError`` (FK)."""
        self.conn.execute(
            insert(edge).values(
                id=edge_id,
                source=source,
                target=target,
                created_at=created_at,
                deleted_at=None,
            )
        )

    def soft_delete_node(self, node_id: str, when: str) -> bool:
        """Stamp ``deleted_at`` if still null. Returns True if a row changed.

        Incident edges and instances are left untouched.
        """
        result = self.conn.execute(
            update(node)
            .where(node.c.id == node_id, node.c.deleted_at.is_(None))
            .values(deleted_at=when)
        )
        return result.rowcount > 0

    def soft_delete_edge(self, edge_id: str, when: str) -> bool:
        """Stamp the edge's ``deleted_at`` if still null. Returns True if a row changed."""
        result = self.conn.execute(
            update(edge)
            .where(edge.c.id == edge_id, edge.c.deleted_at.is_(None))
            .values(deleted_at=when)
        )
        return result.rowcount > 0

    def append_instance(
        self,
        node_id: str,
        value: str,
        instance_type: int,
        saved_at: str,
        *,
        instance_id: str | None = None,
    ) -> dict[str, Any]:
        """Append one history row for *node_id* and return it.

        ``seq`` is the next slot after the node's newest instance. Two
        writers racing for the same slot collide on
        ``UNIQUE(node_id, seq)`` rather than interleaving silently.
        """
        if not self.history:
            msg = "node_instance table is not enabled for this store"
            raise RuntimeError(msg)

        current = self.conn.execute(
            select(func.max(node_instance.c.seq)).where(node_instance.c.node_id == node_id)
        ).scalar()
        seq = 0 if current is None else int(current) + 1

        row = {
            "id": instance_id or str(uuid.uuid4()),
            "node_id": node_id,
            "value": value,
            "instance_type": instance_type,
            "seq": seq,
            "saved_at": saved_at,
        }
        self.conn.execute(insert(node_instance).values(**row))
        return row


class GraphStore:
    """Owns the SQLAlchemy engine for one graph database.

    Constructed once from :class:`SoftgraphSettings` and handed to every
    service through :class:`BaseService`.
    """

    def __init__(self, settings: SoftgraphSettings) -> None:
        self._settings = settings
        db = settings.database
        self._db_path = settings.root / db.path if db.path else database_path(settings.root)
        self._engine: Engine = init_database(
            settings.root,
            history=db.history,
            db_path=self._db_path,
            wal=db.wal,
            echo=db.echo,
        )

    @property
    def root(self) -> Path:
        """The graph root directory."""
        return self._settings.root

    @property
    def db_path(self) -> Path:
        """Location of the SQLite database file."""
        return self._db_path

    @property
    def engine(self) -> Engine:
        """The underlying SQLAlchemy engine (for direct access when needed)."""
        return self._engine

    @property
    def settings(self) -> SoftgraphSettings:
        """The resolved settings for this store."""
        return self._settings

    @property
    def history_enabled(self) -> bool:
        """Whether the ``node_instance`` log is part of this schema."""
        return self._settings.database.history

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[StoreTransaction]:
        """One database transaction: commit on success, rollback on failure.

        Usage::

            with store.transaction() as txn:
                txn.insert_node(node_id, now)
                txn.append_instance(node_id, value, 0, now)
                # Both commit together or not at all.
        """
        with self._engine.begin() as conn:
            yield StoreTransaction(conn=conn, history=self.history_enabled)
