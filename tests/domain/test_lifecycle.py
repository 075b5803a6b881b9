"""Tests for instance types and node state rules."""

from softgraph.domain.lifecycle import (
    INSTANCE_TYPE_VALUES,
    NODE_TRANSITIONS,
    InstanceType,
    NodeState,
    is_valid_transition,
    node_state,
    state_after,
)


class TestInstanceType:
    def test_stored_values(self) -> None:
        assert InstanceType.CREATED == 0
        assert InstanceType.UPDATED == 1
        assert InstanceType.DELETED == 2
        assert InstanceType.RESTORED == 3

    def test_value_set(self) -> None:
        assert INSTANCE_TYPE_VALUES == frozenset({0, 1, 2, 3})


class TestTransitions:
    def test_live_to_deleted(self) -> None:
        assert is_valid_transition("live", "deleted", NODE_TRANSITIONS)

    def test_deleted_to_live(self) -> None:
        assert is_valid_transition("deleted", "live", NODE_TRANSITIONS)

    def test_no_self_transition(self) -> None:
        assert not is_valid_transition("live", "live", NODE_TRANSITIONS)
        assert not is_valid_transition("deleted", "deleted", NODE_TRANSITIONS)

    def test_unknown_state(self) -> None:
        assert not is_valid_transition("archived", "live", NODE_TRANSITIONS)


class TestNodeState:
    def test_state_after(self) -> None:
        assert state_after(InstanceType.CREATED) is NodeState.LIVE
        assert state_after(InstanceType.UPDATED) is NodeState.LIVE
        assert state_after(InstanceType.DELETED) is NodeState.DELETED
        assert state_after(InstanceType.RESTORED) is NodeState.LIVE

    def test_without_history_uses_deleted_at(self) -> None:
        assert node_state(None) is NodeState.LIVE
        assert node_state("2026-01-01T00:00:00+00:00") is NodeState.DELETED

    def test_restored_node_is_live_despite_deleted_at(self) -> None:
        """deleted_at is never cleared, so the latest instance wins."""
        assert node_state("2026-01-01T00:00:00+00:00", 3) is NodeState.LIVE

    def test_latest_deleted_wins(self) -> None:
        assert node_state("2026-01-01T00:00:00+00:00", 2) is NodeState.DELETED
