"""SoftgraphSettings: one frozen object for CLI flags, env and ``softgraph.toml``.

Sources, strongest first:

1. keyword arguments (the global CLI flags, or a library caller's overrides)
2. ``SOFTGRAPH_*`` environment variables, ``__`` between section and key
   (``SOFTGRAPH_DATABASE__HISTORY=false``)
3. the ``[database]`` / ``[graph]`` tables of ``softgraph.toml``
4. defaults in :mod:`softgraph.config.models`

pydantic-settings deep-merges the sources, so a TOML file that sets only
``[database] wal`` keeps every other database default.
"""

from __future__ import annotations

import logging
import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from softgraph.config.discovery import locate_config
from softgraph.config.models import DatabaseConfig, GraphConfig

logger = logging.getLogger(__name__)

# TOML path for the settings object currently being built on this thread.
# pydantic-settings builds sources from the class, not the instance.
_pending = threading.local()


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise click.ClickException(msg) from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings source backed by the sections of one ``softgraph.toml``."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        data = _read_toml(toml_path) if toml_path is not None else {}
        known = set(settings_cls.model_fields)
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown key %r in %s", key, toml_path)
        self._data = {key: value for key, value in data.items() if key in known}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return dict(self._data)


class SoftgraphSettings(BaseSettings):
    """Resolved configuration for one graph.

    Attributes:
        root: Directory the graph belongs to; the default database lives
            at ``root/.softgraph/softgraph.db``.
        config_path: The ``softgraph.toml`` that was read, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SOFTGRAPH_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    graph: GraphConfig = Field(default_factory=GraphConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_path = getattr(_pending, "toml_path", None)
        return (init_settings, env_settings, TomlSettingsSource(settings_cls, toml_path))

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> SoftgraphSettings:
        """Build settings for one CLI invocation (or one library caller).

        :func:`locate_config` picks the TOML file and graph root; the
        remaining keyword arguments are applied over TOML and env values.
        """
        location = locate_config(config_path, root)
        _pending.toml_path = location.toml_path
        try:
            return cls(root=location.root, config_path=location.toml_path, **cli_flags)
        finally:
            _pending.toml_path = None
