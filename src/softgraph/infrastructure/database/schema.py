"""SQLAlchemy Core table definitions for the graph database.

Two variants share one :data:`metadata`:

- base: ``node`` and ``edge`` with the ``edge_source`` / ``edge_target``
  adjacency indexes.
- history: base plus the append-only ``node_instance`` log.

Timestamps are ISO 8601 UTC strings stored as TEXT.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

node = Table(
    "node",
    metadata,
    Column("id", Text, primary_key=True),
    Column("created_at", Text, nullable=False),
    Column("deleted_at", Text),  # NULL = live; never cleared once set
)

edge = Table(
    "edge",
    metadata,
    Column("id", Text, primary_key=True),
    Column("source", Text, ForeignKey("node.id"), nullable=False),
    Column("target", Text, ForeignKey("node.id"), nullable=False),
    Column("created_at", Text, nullable=False),
    Column("deleted_at", Text),
)

# Adjacency lookups in both directions.
Index("edge_source", edge.c.source)
Index("edge_target", edge.c.target)

node_instance = Table(
    "node_instance",
    metadata,
    Column("id", Text, primary_key=True),
    Column("node_id", Text, ForeignKey("node.id"), nullable=False),
    Column("value", Text, nullable=False),  # opaque serialized payload
    Column("instance_type", Integer, nullable=False),
    Column("seq", Integer, nullable=False),  # 0-based replay order per node
    Column("saved_at", Text, nullable=False),
    CheckConstraint("instance_type IN (0, 1, 2, 3)", name="ck_node_instance_type"),
    UniqueConstraint("node_id", "seq", name="uq_node_instance_seq"),
)

BASE_TABLES: tuple[Table, ...] = (node, edge)
HISTORY_TABLES: tuple[Table, ...] = (node, edge, node_instance)
