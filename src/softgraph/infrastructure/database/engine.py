"""Database engine setup for SQLite.

Referential integrity is not optional: every pooled connection runs
``PRAGMA foreign_keys=ON`` as soon as it is opened. SQLite leaves the
pragma off by default and it is per-connection, so setting it once per
database is not enough.

The DB is stored at ``{root}/.softgraph/softgraph.db`` unless an
explicit path is configured.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from softgraph.infrastructure.database.schema import BASE_TABLES, HISTORY_TABLES, metadata

logger = logging.getLogger(__name__)

DATA_DIRNAME = ".softgraph"
DB_FILENAME = "softgraph.db"


def database_path(root: Path) -> Path:
    """Default database location for a graph rooted at *root*."""
    return root / DATA_DIRNAME / DB_FILENAME


def create_db_engine(db_path: Path, *, wal: bool = True, echo: bool = False) -> Engine:
    """Create a SQLite engine with foreign keys enabled (and WAL mode if *wal*)."""
    engine = create_engine(f"sqlite:///{db_path}", echo=echo)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        if wal:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(
    root: Path,
    *,
    history: bool = True,
    db_path: Path | None = None,
    wal: bool = True,
    echo: bool = False,
) -> Engine:
    """Initialize the graph database under *root*.

    Creates the ``.softgraph/`` directory and the tables of the chosen
    variant: ``node`` + ``edge`` always, ``node_instance`` when *history*
    is set. Idempotent — safe to call on an existing database.

    Returns the engine ready for use.
    """
    path = db_path if db_path is not None else database_path(root)
    path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(path, wal=wal, echo=echo)
    tables = HISTORY_TABLES if history else BASE_TABLES
    metadata.create_all(engine, tables=list(tables))
    logger.debug("Initialized database at %s (history=%s)", path, history)
    return engine
