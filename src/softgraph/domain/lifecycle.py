"""Node lifecycle: instance types, states, and transitions.

A node is either live or deleted. Deletion is soft: ``node.deleted_at``
is stamped once and never cleared. In the history-enabled variant the
latest ``node_instance`` row decides the current state, so a restored
node is live again even though its ``deleted_at`` stays set.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class InstanceType(IntEnum):
    """Transition tag stored in ``node_instance.instance_type``."""

    CREATED = 0
    UPDATED = 1
    DELETED = 2
    RESTORED = 3


class NodeState(StrEnum):
    """Derived state of a node."""

    LIVE = "live"
    DELETED = "deleted"


NODE_TRANSITIONS: dict[str, list[str]] = {
    "live": ["deleted"],
    "deleted": ["live"],
}

INSTANCE_TYPE_VALUES: frozenset[int] = frozenset(int(t) for t in InstanceType)


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]],
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed


def state_after(instance_type: int) -> NodeState:
    """State a node is in right after an instance of *instance_type*."""
    if InstanceType(instance_type) is InstanceType.DELETED:
        return NodeState.DELETED
    return NodeState.LIVE


def node_state(deleted_at: str | None, latest_type: int | None = None) -> NodeState:
    """Compute the current state of a node.

    *latest_type* is the ``instance_type`` of the node's newest instance,
    or None when history is disabled or the node has no instances yet.
    """
    if latest_type is not None:
        return state_after(latest_type)
    return NodeState.LIVE if deleted_at is None else NodeState.DELETED
