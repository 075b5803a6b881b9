"""BaseService — foundation for all softgraph services.

Every service receives a :class:`GraphStore` at construction time. The
store provides the engine and transactional write access. Services own
their transaction boundaries via ``self._store.transaction()``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from softgraph.infrastructure.database.errors import classify_integrity_error, error_code
from softgraph.infrastructure.repositories.graph import GraphRepository
from softgraph.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from sqlalchemy.exc import IntegrityError

    from softgraph.infrastructure.store import GraphStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class NodeService(BaseService):
            def create_node(self, value: str) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: GraphStore) -> None:
        self._store = store
        self._repo = GraphRepository(store.engine)

    @staticmethod
    def _fail(
        op: str,
        code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Build a failed ServiceResult."""
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )

    def _integrity_failure(
        self,
        op: str,
        exc: IntegrityError,
        detail: dict[str, Any] | None = None,
    ) -> ServiceResult:
        """Translate an engine constraint violation into a failed ServiceResult.

        The transaction has already rolled back by the time this runs.
        """
        kind = classify_integrity_error(exc)
        logger.debug("%s rejected by engine: %s (%s)", op, kind, exc.orig)
        return self._fail(
            op,
            error_code(exc),
            f"Constraint violation ({kind}): {exc.orig}",
            {**(detail or {}), "constraint": str(kind)},
        )
