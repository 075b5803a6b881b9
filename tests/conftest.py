"""Shared pytest fixtures and test helpers for softgraph tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from softgraph.config.settings import SoftgraphSettings
from softgraph.infrastructure.database.engine import init_database
from softgraph.infrastructure.store import GraphStore


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with the history variant of the schema."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def store(tmp_path: Path) -> Generator[GraphStore]:
    """GraphStore on a temp root with node history enabled."""
    s = GraphStore(SoftgraphSettings.from_cli(root=tmp_path))
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def base_store(tmp_path: Path) -> Generator[GraphStore]:
    """GraphStore on a temp root using the base schema (no node_instance)."""
    settings = SoftgraphSettings.from_cli(root=tmp_path, database={"history": False})
    s = GraphStore(settings)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so the CLI creates an isolated database.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes.
    """
    monkeypatch.delenv("SOFTGRAPH_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def create_node(store: GraphStore, value: str = "v", **kwargs: Any) -> dict[str, Any]:
    """Create a node via NodeService, asserting success."""
    from softgraph.services.nodes import NodeService

    result = NodeService(store).create_node(value, **kwargs)
    assert result.ok, result.error
    return result.data


def create_edge(store: GraphStore, source: str, target: str, **kwargs: Any) -> dict[str, Any]:
    """Create an edge via EdgeService, asserting success."""
    from softgraph.services.edges import EdgeService

    result = EdgeService(store).create_edge(source, target, **kwargs)
    assert result.ok, result.error
    return result.data
