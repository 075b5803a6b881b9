"""Per-invocation state shared by every softgraph subcommand.

The root group builds one :class:`AppContext` from the resolved settings
and stores it as ``ctx.obj``; subcommands receive it via
``@click.pass_obj``, call one service method, and hand the result to
:meth:`AppContext.emit`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from softgraph.config.logging import configure_logging
from softgraph.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from softgraph.config.settings import SoftgraphSettings
    from softgraph.infrastructure.store import GraphStore
    from softgraph.services.result import ServiceResult


class AppContext:
    """Settings, logging and the graph store for one command run.

    Opening the store creates the database file, so it happens on first
    access to :attr:`store`; ``--help``, ``--examples`` and ``--version``
    leave the filesystem alone.
    """

    def __init__(self, settings: SoftgraphSettings) -> None:
        self.settings = settings
        self._store: GraphStore | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def store(self) -> GraphStore:
        if self._store is None:
            from softgraph.infrastructure.store import GraphStore

            self._store = GraphStore(self.settings)
        return self._store

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def close(self) -> None:
        """Dispose of the engine; registered with ``ctx.call_on_close``."""
        if self._store is not None:
            self._store.close()
            self._store = None

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and set the exit status.

        Successful results go to stdout, with any warnings on stderr as
        ``WARNING:`` lines (JSON output already carries them). A failed
        result goes to stderr and ends the command with exit code 1.
        """
        settings = self.output_settings
        text = format_result(result, settings=settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
