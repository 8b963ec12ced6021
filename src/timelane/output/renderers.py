"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO); the caller
extracts the text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from timelane.output.console import create_console, get_output, style_for_lane

if TYPE_CHECKING:
    from rich.console import Console

    from timelane.services.result import ServiceResult

# Character columns used for the lane strip and month ruler.
STRIP_COLUMNS = 72


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Lane results print one line of item ids per lane; item lists print
    one id per line.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    lanes = result.data.get("lanes")
    if isinstance(lanes, list) and lanes:
        return "\n".join(" ".join(_extract_id(entry) for entry in lane) for lane in lanes)

    items = result.data.get("items")
    if isinstance(items, list) and items:
        return "\n".join(_extract_id(item) for item in items)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(entry: Any) -> str:
    if isinstance(entry, dict):
        value = entry.get("id")
        return "" if value is None else str(value)
    return str(entry)


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="tl.ok")
    op = Text(f"  {result.op}", style="tl.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="tl.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="tl.id")
    elif key.endswith("path") or key == "root":
        v = Text(str(value), style="tl.path")
    elif key == "name":
        v = Text(str(value), style="tl.name")
    elif key == "lane":
        v = Text(str(value), style="tl.lane")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _span(record: dict[str, Any]) -> str:
    return f"{record.get('start', '?')} .. {record.get('end', '?')}"


def _item_table(items: list[dict[str, Any]], *, lane: bool = False) -> Table:
    """Build a Rich Table for a list of item records."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="tl.id", no_wrap=True, justify="right")
    table.add_column("Name", style="tl.name")
    table.add_column("Start", style="tl.date")
    table.add_column("End", style="tl.date")
    if lane:
        table.add_column("Lane", style="tl.lane", justify="right")
        table.add_column("Left", justify="right")
        table.add_column("Width", justify="right")

    for item in items:
        row = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            str(item.get("start", "")),
            str(item.get("end", "")),
        ]
        if lane:
            row += [str(item.get(key, "")) for key in ("lane", "left", "width")]
        table.add_row(*row)
    return table


def _columns(px: float, total_px: float, columns: int) -> int:
    if total_px <= 0:
        return 0
    return min(columns, max(0, int(px / total_px * columns)))


def _lane_strip(lane: list[dict[str, Any]], total_px: float, number: int) -> Text:
    """One lane drawn as a row of block characters, labelled with item ids."""
    cells = [" "] * STRIP_COLUMNS
    for placed in lane:
        first = _columns(placed["left"], total_px, STRIP_COLUMNS)
        last = max(first + 1, _columns(placed["left"] + placed["width"], total_px, STRIP_COLUMNS))
        label = str(placed["id"])
        for col in range(first, min(last, STRIP_COLUMNS)):
            offset = col - first
            cells[col] = label[offset] if offset < len(label) else "█"
    text = Text(f"  {number:>3} │", style="tl.lane")
    text.append("".join(cells), style=style_for_lane(number))
    text.append("│", style="tl.lane")
    return text


def _month_ruler(months: list[dict[str, Any]], total_px: float) -> Text:
    cells = [" "] * STRIP_COLUMNS
    for month in months:
        col = _columns(month["offset"], total_px, STRIP_COLUMNS)
        # Labels never overwrite the previous one.
        if col < STRIP_COLUMNS and cells[col] == " " and (col == 0 or cells[col - 1] == " "):
            for i, ch in enumerate(month["label"]):
                if col + i >= STRIP_COLUMNS:
                    break
                cells[col + i] = ch
    return Text("       " + "".join(cells).rstrip(), style="tl.month")


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="tl.error")
    op = Text(f"  {result.op}", style="tl.op")
    console.print(label, op, Text(" - "), Text(msg))

    if err and err.code:
        console.print(Text(f"  code: {err.code}", style="dim"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Renderers ─────────────────────────────────────────────────────────


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("root", "db_path", "seeded", "count"):
        if key in d:
            _field(console, key, d[key])


def _render_item_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    if not items:
        console.print("No items.")
        return
    console.print(_item_table(items))
    console.print(f"\n{result.data.get('count', len(items))} items")


def _render_layout(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Lane strip with a month ruler, followed by a per-lane listing."""
    d = result.data
    lanes: list[list[dict[str, Any]]] = d.get("lanes", [])
    if not lanes:
        console.print("No items.")
        return

    console.print(
        f"[bold]{d.get('min_date')}[/bold] .. [bold]{d.get('max_date')}[/bold]"
        f"  zoom {d.get('zoom')}x  {len(lanes)} lanes"
    )
    total_px = float(d.get("width") or 0.0)
    console.print(_month_ruler(d.get("months", []), total_px))
    for number, lane in enumerate(lanes):
        console.print(_lane_strip(lane, total_px, number))

    console.print()
    if verbose:
        console.print(_item_table([placed for lane in lanes for placed in lane], lane=True))
        console.print(f"\nwidth: {d.get('width')}px  depth: {d.get('depth')}")
        return
    for number, lane in enumerate(lanes):
        names = ", ".join(f"[tl.id]{p['id']}[/tl.id] {escape(p['name'])}" for p in lane)
        console.print(f"  [tl.lane]lane {number}[/tl.lane]  {names}")


def _render_drag(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("id"))
    _field(console, "handle", d.get("handle"))
    _field(console, "days", d.get("days"))
    before, after = d.get("before", {}), d.get("after", {})
    _field(console, "before", _span(before))
    _field(console, "after", _span(after))
    if d.get("lane") is not None:
        _field(console, "lane", d["lane"])


def _render_rename(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    _field(console, "id", d.get("id"))
    _field(console, "before", d.get("before"))
    _field(console, "name", d.get("after"))


def _render_replay(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    d = result.data
    for key in ("events", "commits", "failures", "stale", "zoom"):
        if key in d:
            _field(console, key, d[key])
    for number, lane in enumerate(d.get("lanes", [])):
        ids = " ".join(str(i) for i in lane)
        console.print(f"  [tl.lane]lane {number}[/tl.lane]  {ids}")
    if verbose and d.get("items"):
        console.print()
        console.print(_item_table(d["items"]))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "init": _render_init,
    "seed": _render_init,
    "list_items": _render_item_table,
    "layout": _render_layout,
    "drag": _render_drag,
    "rename": _render_rename,
    "replay": _render_replay,
}
