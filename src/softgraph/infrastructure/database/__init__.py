"""SQLite database engine, schema, and constraint classification via SQLAlchemy Core."""

from softgraph.infrastructure.database.engine import (
    create_db_engine,
    database_path,
    init_database,
)
from softgraph.infrastructure.database.errors import (
    ConstraintViolation,
    classify_integrity_error,
)
from softgraph.infrastructure.database.schema import (
    BASE_TABLES,
    HISTORY_TABLES,
    edge,
    metadata,
    node,
    node_instance,
)

__all__ = [
    "BASE_TABLES",
    "HISTORY_TABLES",
    "ConstraintViolation",
    "classify_integrity_error",
    "create_db_engine",
    "database_path",
    "edge",
    "init_database",
    "metadata",
    "node",
    "node_instance",
]
