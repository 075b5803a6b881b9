"""InitService — report on the database a store has just opened.

The store creates the schema on construction, so ``init`` is idempotent
and only has to describe what is there.
"""

from __future__ import annotations

from sqlalchemy import inspect

from softgraph.domain.lifecycle import InstanceType
from softgraph.services.base import BaseService
from softgraph.services.result import ServiceResult


class InitService(BaseService):
    """Describe the schema variant and contents of the current database."""

    def init(self) -> ServiceResult:
        op = "init"
        insp = inspect(self._store.engine)
        tables = sorted(insp.get_table_names())
        indexes = sorted(ix["name"] for ix in insp.get_indexes("edge") if ix["name"])

        history = self._store.history_enabled
        deleted_type = int(InstanceType.DELETED) if history else None

        warnings: list[str] = []
        if self._repo.has_history() and not history:
            warnings.append("node_instance table exists but history is disabled in config")

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(self._store.root),
                "db_path": str(self._store.db_path),
                "history": history,
                "tables": tables,
                "indexes": indexes,
                "node_count": self._repo.count_nodes(include_deleted=True),
                "live_node_count": self._repo.count_nodes(deleted_type=deleted_type),
            },
            warnings=warnings,
        )
