"""TimelineService — CLI-facing operations over a workspace's timeline.

Each operation opens a short-lived :class:`TimelineSession` on the
workspace store, drives it with synthetic input (a drag is a pointer
down/move/up at computed pixel offsets), waits for reconciliation, and
reports through ServiceResult.
"""

from __future__ import annotations

import asyncio
import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from timelane.domain.events import parse_events
from timelane.domain.geometry import days_to_px
from timelane.domain.interaction import Handle
from timelane.domain.items import find_item, items_to_records
from timelane.domain.lanes import assign_lanes, lane_index
from timelane.services.base import BaseService
from timelane.services.reconcile import Reconciliation, StoreBackend
from timelane.services.result import ErrorCode, ServiceResult
from timelane.services.session import TimelineSession


def _failed(results: Iterable[Reconciliation]) -> list[Reconciliation]:
    return [r for r in results if not r.ok]


def _persistence_failure(op: str, failures: list[Reconciliation]) -> ServiceResult:
    first = failures[0]
    return ServiceResult.failure(
        op,
        ErrorCode.PERSISTENCE_FAILED,
        f"Could not save item {first.edit.item_id}: {first.error}",
        rolled_back=first.rolled_back,
        failures=len(failures),
    )


def _rejection(handle: Handle, days: int) -> str:
    inward = (handle is Handle.START and days > 0) or (handle is Handle.END and days < 0)
    if inward:
        return f"Rejected: {handle.value} handle cannot cross the other end."
    return f"Rejected: moving by {days} days leaves the supported date range."


class TimelineService(BaseService):
    """Lists, lays out, and edits the items of one workspace."""

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def init(self, records: Iterable[Mapping[str, Any]] | None = None) -> ServiceResult:
        """Create the workspace database, optionally seeding it with *records*."""
        op = "init"
        store = self._workspace.store
        seeded = 0
        if records is not None:
            try:
                seeded = store.add_items(records)
            except ValueError as exc:
                return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "root": str(self._workspace.root),
                "db_path": str(self._workspace.db_path),
                "seeded": seeded,
                "count": len(store.fetch_all()),
            },
        )

    def seed(self, records: Iterable[Mapping[str, Any]]) -> ServiceResult:
        """Insert or replace *records* in an existing workspace, all or nothing."""
        op = "seed"
        if (missing := self._require_workspace(op)) is not None:
            return missing
        store = self._workspace.store
        try:
            seeded = store.add_items(records)
        except ValueError as exc:
            return ServiceResult.failure(op, ErrorCode.INVALID_INPUT, str(exc))
        return ServiceResult(
            ok=True, op=op, data={"seeded": seeded, "count": len(store.fetch_all())}
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_items(self) -> ServiceResult:
        op = "list_items"
        if (missing := self._require_workspace(op)) is not None:
            return missing
        records = self._workspace.store.fetch_all()
        return ServiceResult(ok=True, op=op, data={"items": records, "count": len(records)})

    def layout(self, *, zoom: float | None = None) -> ServiceResult:
        op = "layout"
        if (missing := self._require_workspace(op)) is not None:
            return missing
        return asyncio.run(self._layout(op, zoom))

    async def _layout(self, op: str, zoom: float | None) -> ServiceResult:
        session = self._session(zoom)
        await session.load()
        return ServiceResult(ok=True, op=op, data=session.layout().to_dict())

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def drag(
        self,
        item_id: int,
        handle: Handle | str,
        *,
        pixels: float | None = None,
        days: int | None = None,
        zoom: float | None = None,
    ) -> ServiceResult:
        """Drag *item_id* by its *handle* for *pixels* (or exactly *days*)."""
        op = "drag"
        if (missing := self._require_workspace(op)) is not None:
            return missing
        settings = self._workspace.settings
        if days is not None and pixels is None:
            pixels = days_to_px(
                days, settings.zoom.level(zoom), day_width_px=settings.timeline.day_width_px
            )
        elif days is not None or pixels is None:
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, "Specify exactly one of pixels or days."
            )
        if not math.isfinite(pixels):
            return ServiceResult.failure(
                op, ErrorCode.INVALID_INPUT, f"Drag distance must be finite, got {pixels}."
            )
        return asyncio.run(self._drag(op, item_id, Handle(handle), pixels, zoom))

    async def _drag(
        self, op: str, item_id: int, handle: Handle, pixels: float, zoom: float | None
    ) -> ServiceResult:
        session = self._session(zoom)
        await session.load()
        before = find_item(session.items, item_id)
        if before is None:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No item found with ID: {item_id}"
            )

        warnings: list[str] = []
        session.pointer_down(item_id, handle, 0.0)
        outcome = session.pointer_move(pixels)
        session.pointer_up()
        results = await session.drain()

        if failures := _failed(results):
            return _persistence_failure(op, failures)
        if outcome.days == 0:
            warnings.append("Drag was shorter than one day; dates unchanged.")
        elif outcome.rejected:
            warnings.append(_rejection(handle, outcome.days))

        after = find_item(session.items, item_id) or before
        lanes = lane_index(assign_lanes(session.items))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "id": item_id,
                "handle": handle.value,
                "days": outcome.days,
                "before": before.to_record(),
                "after": after.to_record(),
                "lane": lanes.get(item_id),
            },
            warnings=warnings,
        )

    def rename(self, item_id: int, name: str) -> ServiceResult:
        op = "rename"
        if (missing := self._require_workspace(op)) is not None:
            return missing
        return asyncio.run(self._rename(op, item_id, name))

    async def _rename(self, op: str, item_id: int, name: str) -> ServiceResult:
        session = self._session(None)
        await session.load()
        before = find_item(session.items, item_id)
        if before is None:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No item found with ID: {item_id}"
            )

        session.begin_rename(item_id)
        session.edit_text(name)
        session.key("Enter")
        if failures := _failed(await session.drain()):
            return _persistence_failure(op, failures)

        after = find_item(session.items, item_id) or before
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": item_id, "before": before.name, "after": after.name},
        )

    def replay(
        self, raw_events: Iterable[Mapping[str, Any]], *, zoom: float | None = None
    ) -> ServiceResult:
        """Feed a scripted stream of input events through one session."""
        op = "replay"
        if (missing := self._require_workspace(op)) is not None:
            return missing
        try:
            events = parse_events(raw_events)
        except ValidationError as exc:
            return ServiceResult.failure(
                op,
                ErrorCode.INVALID_INPUT,
                f"Invalid event script: {exc.error_count()} error(s)",
                errors=[e["msg"] for e in exc.errors()],
            )
        return asyncio.run(self._replay(op, events, zoom))

    async def _replay(self, op: str, events: list[Any], zoom: float | None) -> ServiceResult:
        session = self._session(zoom)
        await session.load()
        for event in events:
            session.dispatch(event)
        results = await session.drain()

        failures = _failed(results)
        warnings = [f"Save of item {r.edit.item_id} failed: {r.error}" for r in failures]
        stale = sum(1 for r in results if r.stale)
        if stale:
            warnings.append(f"{stale} response(s) arrived out of order and overwrote newer state.")

        layout = session.layout()
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "events": len(events),
                "commits": len(results),
                "failures": len(failures),
                "stale": stale,
                "zoom": round(session.zoom.value, 4),
                "items": items_to_records(session.items),
                "lanes": [[p.item.id for p in lane] for lane in layout.lanes],
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _session(self, zoom: float | None) -> TimelineSession:
        return TimelineSession.from_settings(
            StoreBackend(self._workspace.store), self._workspace.settings, zoom=zoom
        )
