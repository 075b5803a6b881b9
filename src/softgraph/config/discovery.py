"""Locating ``softgraph.toml`` and the graph root it belongs to.

Lookup order: an explicit ``--config`` path, then ``SOFTGRAPH_CONFIG``,
then the nearest ``softgraph.toml`` in the start directory or any of its
parents. The graph root is ``--root`` when given, else the directory
holding the config file, else the working directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import click

CONFIG_FILENAME = "softgraph.toml"
CONFIG_ENV_VAR = "SOFTGRAPH_CONFIG"


@dataclass(frozen=True)
class ConfigLocation:
    """Where settings are read from and which directory the graph lives in."""

    root: Path
    toml_path: Path | None = None


def find_config(start: Path | None = None) -> Path | None:
    """Nearest config file at or above *start* (default: cwd).

    A set ``SOFTGRAPH_CONFIG`` wins over the walk-up; if it names a file
    that does not exist, no config is used.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(config_path: str | None = None, root: Path | None = None) -> ConfigLocation:
    """Resolve the config file and graph root for one invocation.

    An explicit *config_path* must exist; a missing one raises
    ``click.ClickException`` rather than silently falling back to defaults.
    """
    if config_path:
        toml_path: Path | None = Path(config_path)
        if not toml_path.is_file():
            msg = f"Config file not found: {config_path}"
            raise click.ClickException(msg)
    else:
        toml_path = find_config(root)

    if root is None:
        root = toml_path.parent if toml_path is not None else Path.cwd()
    return ConfigLocation(root=root, toml_path=toml_path)
