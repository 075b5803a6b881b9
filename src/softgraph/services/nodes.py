"""NodeService — node lifecycle over the soft-delete schema.

Pipeline for every write: VALIDATE → CHECK STATE → PERSIST → RESPOND.

Deletion never removes rows and never clears ``deleted_at``. With the
history log enabled every transition appends a ``node_instance`` row, and
restoring a node is nothing more than appending a ``RESTORED`` instance.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from softgraph.domain.ids import generate_id, validate_id
from softgraph.domain.lifecycle import (
    NODE_TRANSITIONS,
    InstanceType,
    NodeState,
    is_valid_transition,
    node_state,
)
from softgraph.services._helpers import annotate_edges, now_iso, txn_node_state
from softgraph.services.base import BaseService
from softgraph.services.result import ServiceResult

logger = logging.getLogger(__name__)


def _carried_value(latest: dict[str, Any] | None) -> str:
    """Value a DELETED or RESTORED instance repeats from the newest one.

    Nodes written while history was off have no instances yet; their log
    starts with an empty value.
    """
    return str(latest["value"]) if latest is not None else ""


class NodeService(BaseService):
    """Create, update, delete, restore, and inspect nodes."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_node(self, value: str | None = None, *, node_id: str | None = None) -> ServiceResult:
        """Insert a live node and, with history enabled, its CREATED instance."""
        op = "create_node"
        warnings: list[str] = []
        history = self._store.history_enabled

        node_id = node_id or generate_id()
        if not validate_id(node_id):
            return self._fail(op, "INVALID_ID", f"Invalid node id: {node_id!r}", {"id": node_id})
        if history and value is None:
            return self._fail(op, "MISSING_FIELD", "A value is required when history is enabled")
        if not history and value is not None:
            warnings.append("History is disabled; value was not recorded")

        now = now_iso()
        instance: dict[str, Any] | None = None
        try:
            with self._store.transaction() as txn:
                txn.insert_node(node_id, now)
                if history:
                    instance = txn.append_instance(
                        node_id, str(value), int(InstanceType.CREATED), now
                    )
        except IntegrityError as exc:
            return self._integrity_failure(op, exc, {"id": node_id})

        logger.debug("Created node %s", node_id)
        data: dict[str, Any] = {
            "id": node_id,
            "created_at": now,
            "deleted_at": None,
            "state": str(NodeState.LIVE),
        }
        if instance is not None:
            data["value"] = instance["value"]
            data["instance_id"] = instance["id"]
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    def update_node(self, node_id: str, value: str) -> ServiceResult:
        """Append an UPDATED instance carrying *value*."""
        op = "update_node"
        if not self._store.history_enabled:
            return self._history_disabled(op)

        try:
            with self._store.transaction() as txn:
                row = txn.get_node(node_id)
                if row is None:
                    return self._not_found(op, node_id)
                if txn_node_state(txn, row) is NodeState.DELETED:
                    return self._fail(
                        op,
                        "NODE_DELETED",
                        f"Cannot update deleted node: {node_id}",
                        {"id": node_id},
                    )
                instance = txn.append_instance(
                    node_id, value, int(InstanceType.UPDATED), now_iso()
                )
        except IntegrityError as exc:
            return self._integrity_failure(op, exc, {"id": node_id})

        logger.debug("Updated node %s (seq %d)", node_id, instance["seq"])
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": node_id,
                "value": value,
                "instance_id": instance["id"],
                "seq": instance["seq"],
                "state": str(NodeState.LIVE),
            },
        )

    def delete_node(self, node_id: str) -> ServiceResult:
        """Soft-delete a node.

        ``deleted_at`` is stamped only the first time; deleting a restored
        node again keeps that original timestamp and appends a new DELETED
        instance. Incident edges are not touched.
        """
        op = "delete_node"
        history = self._store.history_enabled

        try:
            with self._store.transaction() as txn:
                row = txn.get_node(node_id)
                if row is None:
                    return self._not_found(op, node_id)
                latest = txn.latest_instance(node_id)
                state = node_state(row["deleted_at"], latest["instance_type"] if latest else None)
                if not is_valid_transition(state, NodeState.DELETED, NODE_TRANSITIONS):
                    return self._fail(
                        op,
                        "ALREADY_DELETED",
                        f"Node is already deleted: {node_id}",
                        {"id": node_id, "deleted_at": row["deleted_at"]},
                    )
                now = now_iso()
                txn.soft_delete_node(node_id, now)
                instance = None
                if history:
                    instance = txn.append_instance(
                        node_id, _carried_value(latest), int(InstanceType.DELETED), now
                    )
                deleted_at = row["deleted_at"] or now
        except IntegrityError as exc:
            return self._integrity_failure(op, exc, {"id": node_id})

        logger.debug("Soft-deleted node %s", node_id)
        data: dict[str, Any] = {
            "id": node_id,
            "deleted_at": deleted_at,
            "state": str(NodeState.DELETED),
        }
        if instance is not None:
            data["instance_id"] = instance["id"]
            data["seq"] = instance["seq"]
        return ServiceResult(ok=True, op=op, data=data)

    def restore_node(self, node_id: str) -> ServiceResult:
        """Bring a deleted node back by appending a RESTORED instance."""
        op = "restore_node"
        if not self._store.history_enabled:
            return self._history_disabled(op)

        try:
            with self._store.transaction() as txn:
                row = txn.get_node(node_id)
                if row is None:
                    return self._not_found(op, node_id)
                latest = txn.latest_instance(node_id)
                state = node_state(row["deleted_at"], latest["instance_type"] if latest else None)
                if not is_valid_transition(state, NodeState.LIVE, NODE_TRANSITIONS):
                    return self._fail(
                        op,
                        "NOT_DELETED",
                        f"Cannot restore a node that is not deleted: {node_id}",
                        {"id": node_id},
                    )
                instance = txn.append_instance(
                    node_id, _carried_value(latest), int(InstanceType.RESTORED), now_iso()
                )
        except IntegrityError as exc:
            return self._integrity_failure(op, exc, {"id": node_id})

        logger.debug("Restored node %s", node_id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": node_id,
                "value": instance["value"],
                "instance_id": instance["id"],
                "seq": instance["seq"],
                "deleted_at": row["deleted_at"],
                "state": str(NodeState.LIVE),
            },
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_node(self, node_id: str) -> ServiceResult:
        """Node row plus derived state, current value, and live degrees."""
        op = "get_node"
        history = self._store.history_enabled

        row = self._repo.get_node(node_id)
        if row is None:
            return self._not_found(op, node_id)

        latest = self._repo.latest_instance(node_id) if history else None
        state = node_state(row["deleted_at"], latest["instance_type"] if latest else None)
        outgoing = annotate_edges(self._repo, self._repo.edges_from(node_id), history=history)
        incoming = annotate_edges(self._repo, self._repo.edges_to(node_id), history=history)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": row["id"],
                "created_at": row["created_at"],
                "deleted_at": row["deleted_at"],
                "state": str(state),
                "value": latest["value"] if latest else None,
                "degree_out": sum(1 for e in outgoing if e["live"]),
                "degree_in": sum(1 for e in incoming if e["live"]),
            },
        )

    def history(self, node_id: str) -> ServiceResult:
        """All instances of a node in replay order."""
        op = "node_history"
        if not self._store.history_enabled:
            return self._history_disabled(op)
        if self._repo.get_node(node_id) is None:
            return self._not_found(op, node_id)

        items = [
            {
                "id": inst["id"],
                "seq": inst["seq"],
                "instance_type": InstanceType(inst["instance_type"]).name.lower(),
                "value": inst["value"],
                "saved_at": inst["saved_at"],
            }
            for inst in self._repo.instances(node_id)
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": node_id, "items": items, "count": len(items)},
        )

    # ------------------------------------------------------------------
    # Failures shared by several operations
    # ------------------------------------------------------------------

    def _not_found(self, op: str, node_id: str) -> ServiceResult:
        return self._fail(op, "NOT_FOUND", f"No node with id: {node_id}", {"id": node_id})

    def _history_disabled(self, op: str) -> ServiceResult:
        return self._fail(
            op,
            "HISTORY_DISABLED",
            "Node history is disabled for this database ([database] history = false)",
        )
