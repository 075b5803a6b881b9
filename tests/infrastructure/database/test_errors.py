"""Tests for constraint-violation classification."""

import pytest
from sqlalchemy import insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.expression import Executable

from softgraph.infrastructure.database.errors import (
    ConstraintViolation,
    classify_integrity_error,
    error_code,
)
from softgraph.infrastructure.database.schema import edge, node, node_instance

NOW = "2026-01-01T00:00:00+00:00"


def _capture(engine: Engine, stmt: Executable) -> IntegrityError:
    with pytest.raises(IntegrityError) as info:
        with engine.begin() as conn:
            conn.execute(stmt)
    return info.value


class TestClassifyIntegrityError:
    def test_unique(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
        exc = _capture(db_engine, insert(node).values(id="n1", created_at=NOW))
        assert classify_integrity_error(exc) is ConstraintViolation.UNIQUE
        assert error_code(exc) == "DUPLICATE_ID"

    def test_foreign_key(self, db_engine: Engine) -> None:
        exc = _capture(
            db_engine, insert(edge).values(id="e1", source="a", target="b", created_at=NOW)
        )
        assert classify_integrity_error(exc) is ConstraintViolation.FOREIGN_KEY
        assert error_code(exc) == "MISSING_REFERENCE"

    def test_not_null(self, db_engine: Engine) -> None:
        exc = _capture(db_engine, insert(node).values(id="n1", created_at=None))
        assert classify_integrity_error(exc) is ConstraintViolation.NOT_NULL
        assert error_code(exc) == "MISSING_FIELD"

    def test_check(self, db_engine: Engine) -> None:
        with db_engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
        exc = _capture(
            db_engine,
            insert(node_instance).values(
                id="i1", node_id="n1", value="v", instance_type=9, seq=0, saved_at=NOW
            ),
        )
        assert classify_integrity_error(exc) is ConstraintViolation.CHECK
        assert error_code(exc) == "INVALID_VALUE"

    def test_unknown_message(self) -> None:
        exc = IntegrityError("INSERT ...", {}, Exception("something else went wrong"))
        assert classify_integrity_error(exc) is ConstraintViolation.UNKNOWN
        assert error_code(exc) == "INTEGRITY_ERROR"

    def test_sequence_collision(self, db_engine: Engine) -> None:
        row = {"node_id": "n1", "value": "v", "instance_type": 0, "seq": 0, "saved_at": NOW}
        with db_engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
            conn.execute(insert(node_instance).values(id="i1", **row))
        exc = _capture(db_engine, insert(node_instance).values(id="i2", **row))
        assert classify_integrity_error(exc) is ConstraintViolation.SEQUENCE
        assert error_code(exc) == "CONCURRENT_WRITE"

    def test_duplicate_instance_id_is_unique(self, db_engine: Engine) -> None:
        row = {"node_id": "n1", "value": "v", "instance_type": 0, "saved_at": NOW}
        with db_engine.begin() as conn:
            conn.execute(insert(node).values(id="n1", created_at=NOW))
            conn.execute(insert(node_instance).values(id="i1", seq=0, **row))
        exc = _capture(db_engine, insert(node_instance).values(id="i1", seq=1, **row))
        assert classify_integrity_error(exc) is ConstraintViolation.UNIQUE
