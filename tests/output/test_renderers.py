"""Tests for operation-specific Rich renderers."""

from __future__ import annotations

from typing import Any

from timelane.output.renderers import STRIP_COLUMNS, render_quiet, render_result
from timelane.services.result import ServiceError, ServiceResult

# ── Helpers ───────────────────────────────────────────────────────────


def _ok(op: str, **data: Any) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=dict(data))


def _err(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=dict(detail)),
    )


def _placed(item_id: int, name: str, lane: int, left: float, width: float) -> dict[str, Any]:
    return {
        "id": item_id,
        "name": name,
        "start": "2024-01-01",
        "end": "2024-01-10",
        "lane": lane,
        "left": left,
        "width": width,
    }


LAYOUT = {
    "zoom": 1.0,
    "min_date": "2023-12-25",
    "max_date": "2024-01-27",
    "width": 792.0,
    "depth": 2,
    "lanes": [
        [_placed(1, "Kickoff", 0, 168.0, 216.0), _placed(3, "Build", 0, 408.0, 216.0)],
        [_placed(2, "Design", 1, 264.0, 240.0)],
    ],
    "months": [{"label": "Dec 2023", "offset": 0.0}, {"label": "Jan 2024", "offset": 168.0}],
}


# ── Error rendering ──────────────────────────────────────────────────


class TestErrorRenderer:
    def test_basic_error(self) -> None:
        output = render_result(_err("drag", "NOT_FOUND", "No item found with ID: 9"))
        assert "ERROR" in output
        assert "drag" in output
        assert "No item found with ID: 9" in output
        assert "NOT_FOUND" in output

    def test_verbose_shows_detail(self) -> None:
        output = render_result(
            _err("drag", "PERSISTENCE_FAILED", "Could not save", rolled_back=True), verbose=True
        )
        assert "detail" in output
        assert "rolled_back: True" in output

    def test_no_error_object(self) -> None:
        assert "Unknown error" in render_result(ServiceResult(ok=False, op="x"))


# ── Op renderers ─────────────────────────────────────────────────────


class TestItemTable:
    def test_lists_items(self) -> None:
        items = [
            {"id": 1, "name": "Kickoff", "start": "2024-01-01", "end": "2024-01-10"},
            {"id": 2, "name": "Design", "start": "2024-01-05", "end": "2024-01-15"},
        ]
        output = render_result(_ok("list_items", items=items, count=2))
        assert "Kickoff" in output
        assert "2024-01-15" in output
        assert "2 items" in output

    def test_empty(self) -> None:
        assert "No items." in render_result(_ok("list_items", items=[], count=0))


class TestLayout:
    def test_header_and_lanes(self) -> None:
        output = render_result(_ok("layout", **LAYOUT))
        assert "2023-12-25" in output
        assert "2 lanes" in output
        assert "Dec 2023" in output
        assert "Jan 2024" in output
        assert "lane 0" in output
        assert "Kickoff" in output

    def test_strip_rows_have_fixed_width(self) -> None:
        output = render_result(_ok("layout", **LAYOUT))
        strips = [line for line in output.splitlines() if line.count("│") == 2]
        assert len(strips) == 2
        for line in strips:
            inner = line.split("│")[1]
            assert len(inner) == STRIP_COLUMNS

    def test_strip_labels_items(self) -> None:
        output = render_result(_ok("layout", **LAYOUT))
        first_lane = next(line for line in output.splitlines() if line.count("│") == 2)
        assert "1█" in first_lane
        assert "3█" in first_lane

    def test_verbose_table(self) -> None:
        output = render_result(_ok("layout", **LAYOUT), verbose=True)
        assert "Left" in output
        assert "depth: 2" in output

    def test_empty(self) -> None:
        data = {**LAYOUT, "lanes": [], "months": [], "min_date": None, "max_date": None}
        assert "No items." in render_result(_ok("layout", **data))


class TestMutations:
    def test_drag(self) -> None:
        output = render_result(
            _ok(
                "drag",
                id=1,
                handle="end",
                days=3,
                before={"start": "2024-01-01", "end": "2024-01-10"},
                after={"start": "2024-01-01", "end": "2024-01-13"},
                lane=0,
            )
        )
        assert "OK" in output
        assert "2024-01-01 .. 2024-01-13" in output
        assert "handle: end" in output

    def test_rename(self) -> None:
        output = render_result(_ok("rename", id=2, before="Design", after="Design review"))
        assert "name: Design review" in output

    def test_init(self) -> None:
        output = render_result(_ok("init", root="/tmp/x", db_path="/tmp/x/db", seeded=3, count=3))
        assert "seeded: 3" in output

    def test_replay(self) -> None:
        output = render_result(
            _ok("replay", events=4, commits=1, failures=0, stale=0, zoom=1.0, lanes=[[1, 3], [2]])
        )
        assert "commits: 1" in output
        assert "1 3" in output

    def test_generic_fallback(self) -> None:
        output = render_result(_ok("something_else", flag=True, nested={"a": 1}))
        assert "flag: True" in output
        assert '{"a":1}' in output


# ── Quiet mode ───────────────────────────────────────────────────────


class TestQuiet:
    def test_layout_prints_lane_ids(self) -> None:
        assert render_quiet(_ok("layout", **LAYOUT)) == "1 3\n2"

    def test_replay_lanes(self) -> None:
        assert render_quiet(_ok("replay", lanes=[[1], [2, 3]], items=[])) == "1\n2 3"

    def test_items_one_per_line(self) -> None:
        assert render_quiet(_ok("list_items", items=[{"id": 4}, {"id": 7}])) == "4\n7"

    def test_plain_ok(self) -> None:
        assert render_quiet(_ok("rename", id=1)) == "OK: rename"

    def test_error(self) -> None:
        assert render_quiet(_err("drag", "NOT_FOUND", "gone")) == "ERROR: drag - gone"
