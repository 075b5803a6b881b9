"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from softgraph.output.console import create_console, get_output, style_for_state

if TYPE_CHECKING:
    from rich.console import Console

    from softgraph.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item["id"]) for item in items if isinstance(item, dict))
    if "id" in result.data:
        return str(result.data["id"])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="sg.ok"), Text(f"  {result.op}", style="sg.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="sg.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="sg.id")
    elif key == "state":
        v = Text(str(value), style=style_for_state(value == "live"))
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v)


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = f" [{err.code}]" if err else ""
    label = Text("ERROR", style="sg.error")
    op = Text(f"  {result.op}{code}", style="sg.op")
    console.print(label, op, "—", msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose and result.meta:
        for key, value in result.meta.items():
            _field(console, key, value)


def _render_edge_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render outgoing/incoming adjacency lists."""
    _status_line(console, result)
    _field(console, "id", result.data.get("id"))
    items: list[dict[str, Any]] = result.data.get("items", [])

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Edge", style="sg.id", no_wrap=True)
    table.add_column("Source")
    table.add_column("Target")
    table.add_column("State")
    if verbose:
        table.add_column("Created", style="dim")
        table.add_column("Deleted", style="dim")

    for item in items:
        live = bool(item.get("live"))
        row = [
            str(item["id"]),
            str(item["source"]),
            str(item["target"]),
            Text("live" if live else "deleted", style=style_for_state(live)),
        ]
        if verbose:
            row += [str(item.get("created_at", "")), str(item.get("deleted_at") or "")]
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} edges")


def _render_history(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a node's instance log in replay order."""
    _status_line(console, result)
    _field(console, "id", result.data.get("id"))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Seq", justify="right")
    table.add_column("Type")
    table.add_column("Value")
    table.add_column("Saved", style="dim")
    if verbose:
        table.add_column("Instance", style="sg.id", no_wrap=True)

    for item in result.data.get("items", []):
        row = [str(item["seq"]), item["instance_type"], str(item["value"]), item["saved_at"]]
        if verbose:
            row.append(str(item["id"]))
        table.add_row(*row)
    console.print(table)


_OP_RENDERERS: dict[str, Any] = {
    "outgoing": _render_edge_table,
    "incoming": _render_edge_table,
    "node_history": _render_history,
}
