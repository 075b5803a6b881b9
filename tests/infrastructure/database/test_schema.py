"""Tests for database schema definitions and the constraints they enforce."""

from pathlib import Path

import pytest
from sqlalchemy import insert, inspect, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from softgraph.infrastructure.database.engine import create_db_engine
from softgraph.infrastructure.database.schema import (
    BASE_TABLES,
    HISTORY_TABLES,
    edge,
    metadata,
    node,
    node_instance,
)

NOW = "2026-01-01T00:00:00+00:00"
LATER = "2026-01-02T00:00:00+00:00"


def _engine(tmp_path: Path, *, history: bool = True) -> Engine:
    """File-backed engine with foreign keys on and the chosen variant created."""
    engine = create_db_engine(tmp_path / "schema.db")
    metadata.create_all(engine, tables=list(HISTORY_TABLES if history else BASE_TABLES))
    return engine


def _seed_pair(engine: Engine) -> None:
    with engine.begin() as conn:
        conn.execute(insert(node).values(id="n1", created_at=NOW))
        conn.execute(insert(node).values(id="n2", created_at=NOW))
        conn.execute(insert(edge).values(id="e1", source="n1", target="n2", created_at=NOW))


class TestSchemaCreation:
    def test_history_variant_tables(self, tmp_path: Path) -> None:
        names = set(inspect(_engine(tmp_path)).get_table_names())
        assert names == {"node", "edge", "node_instance"}

    def test_base_variant_tables(self, tmp_path: Path) -> None:
        names = set(inspect(_engine(tmp_path, history=False)).get_table_names())
        assert names == {"node", "edge"}

    def test_create_all_is_idempotent(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        metadata.create_all(engine)
        assert "node" in inspect(engine).get_table_names()


class TestNodeTable:
    def test_primary_key(self, tmp_path: Path) -> None:
        pk = inspect(_engine(tmp_path)).get_pk_constraint("node")
        assert pk["constrained_columns"] == ["id"]

    def test_columns(self, tmp_path: Path) -> None:
        cols = {c["name"]: c for c in inspect(_engine(tmp_path)).get_columns("node")}
        assert set(cols) == {"id", "created_at", "deleted_at"}
        assert cols["created_at"]["nullable"] is False
        assert cols["deleted_at"]["nullable"] is True

    def test_deleted_at_null_after_insert(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
            row = conn.execute(select(node).where(node.c.id == "n1")).one()
        assert row.deleted_at is None

    def test_duplicate_id_rejected(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
        with pytest.raises(IntegrityError, match="UNIQUE"):
            with engine.begin() as conn:
                conn.execute(insert(node).values(id="n1", created_at=LATER))

    def test_created_at_required(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with pytest.raises(IntegrityError, match="NOT NULL"):
            with engine.begin() as conn:
                conn.execute(insert(node).values(id="n1", created_at=None))


class TestEdgeTable:
    def test_foreign_keys(self, tmp_path: Path) -> None:
        fks = inspect(_engine(tmp_path)).get_foreign_keys("edge")
        pairs = {(fk["constrained_columns"][0], fk["referred_table"]) for fk in fks}
        assert pairs == {("source", "node"), ("target", "node")}

    def test_adjacency_indexes(self, tmp_path: Path) -> None:
        found = inspect(_engine(tmp_path)).get_indexes("edge")
        indexes = {ix["name"]: ix["column_names"] for ix in found}
        assert indexes["edge_source"] == ["source"]
        assert indexes["edge_target"] == ["target"]

    def test_missing_source_rejected(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n2", created_at=NOW))
        with pytest.raises(IntegrityError, match="FOREIGN KEY"):
            with engine.begin() as conn:
                conn.execute(
                    insert(edge).values(id="e1", source="ghost", target="n2", created_at=NOW)
                )

    def test_missing_target_rejected(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
        with pytest.raises(IntegrityError, match="FOREIGN KEY"):
            with engine.begin() as conn:
                conn.execute(
                    insert(edge).values(id="e1", source="n1", target="ghost", created_at=NOW)
                )

    def test_index_lookups_in_both_directions(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        _seed_pair(engine)
        with engine.connect() as conn:
            from_n1 = conn.execute(select(edge.c.id).where(edge.c.source == "n1")).scalars().all()
            to_n2 = conn.execute(select(edge.c.id).where(edge.c.target == "n2")).scalars().all()
        assert set(from_n1) == {"e1"}
        assert set(to_n2) == {"e1"}

    @pytest.mark.parametrize(
        ("column", "index"),
        [("source", "edge_source"), ("target", "edge_target")],
    )
    def test_lookup_uses_index(self, tmp_path: Path, column: str, index: str) -> None:
        engine = _engine(tmp_path)
        _seed_pair(engine)
        with engine.connect() as conn:
            plan = conn.execute(
                text(f"EXPLAIN QUERY PLAN SELECT id FROM edge WHERE {column} = 'n1'")
            ).fetchall()
        assert any(index in str(row) for row in plan)

    def test_soft_deleting_node_keeps_edges(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        _seed_pair(engine)
        with engine.begin() as conn:
            conn.execute(update(node).where(node.c.id == "n1").values(deleted_at=LATER))
            row = conn.execute(select(edge).where(edge.c.id == "e1")).one()
        assert row.deleted_at is None


class TestNodeInstanceTable:
    def test_columns(self, tmp_path: Path) -> None:
        cols = {c["name"]: c for c in inspect(_engine(tmp_path)).get_columns("node_instance")}
        assert {"id", "node_id", "value", "instance_type", "seq", "saved_at"} == set(cols)
        for name in ("node_id", "value", "instance_type", "seq", "saved_at"):
            assert cols[name]["nullable"] is False

    def test_append_only_rows_persist(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
            conn.execute(
                insert(node_instance).values(
                    id="i1", node_id="n1", value="v1", instance_type=0, seq=0, saved_at=NOW
                )
            )
            conn.execute(
                insert(node_instance).values(
                    id="i2", node_id="n1", value="v2", instance_type=1, seq=1, saved_at=LATER
                )
            )
        with engine.connect() as conn:
            rows = conn.execute(
                select(node_instance.c.id, node_instance.c.value).order_by(node_instance.c.seq)
            ).fetchall()
        assert [(r.id, r.value) for r in rows] == [("i1", "v1"), ("i2", "v2")]

    def test_missing_node_rejected(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with pytest.raises(IntegrityError, match="FOREIGN KEY"):
            with engine.begin() as conn:
                conn.execute(
                    insert(node_instance).values(
                        id="i1", node_id="ghost", value="v", instance_type=0, seq=0, saved_at=NOW
                    )
                )

    def test_instance_type_checked(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
        with pytest.raises(IntegrityError, match="CHECK"):
            with engine.begin() as conn:
                conn.execute(
                    insert(node_instance).values(
                        id="i1", node_id="n1", value="v", instance_type=7, seq=0, saved_at=NOW
                    )
                )

    def test_value_required(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
        with pytest.raises(IntegrityError, match="NOT NULL"):
            with engine.begin() as conn:
                conn.execute(
                    insert(node_instance).values(
                        id="i1", node_id="n1", value=None, instance_type=0, seq=0, saved_at=NOW
                    )
                )

    def test_seq_unique_per_node(self, tmp_path: Path) -> None:
        engine = _engine(tmp_path)
        with engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
            conn.execute(
                insert(node_instance).values(
                    id="i1", node_id="n1", value="v", instance_type=0, seq=0, saved_at=NOW
                )
            )
        with pytest.raises(IntegrityError, match="UNIQUE"):
            with engine.begin() as conn:
                conn.execute(
                    insert(node_instance).values(
                        id="i2", node_id="n1", value="v", instance_type=1, seq=0, saved_at=NOW
                    )
                )
