"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, softgraph.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    path: str | None = None  # relative to the graph root; default .softgraph/softgraph.db
    wal: bool = True
    echo: bool = False
    history: bool = True  # create and maintain the node_instance log


class GraphConfig(BaseModel):
    """[graph] section — application-layer policy over the schema."""

    model_config = {"frozen": True}

    allow_deleted_endpoints: bool = False
