"""TimelineSession — one interactive editing session over a backend.

Holds the shared state (item collection, zoom level, the single
interaction session) and wires the data flow:

    pointer/key events ─▶ InteractionController ─▶ ItemState (optimistic)
                                                 └▶ ReconciliationClient (on commit)
    ItemState + ZoomLevel ─▶ layout(): lanes, geometry, month labels

Event handlers run synchronously and never block. The only suspension
point is the backend call, which runs as a background task; the user can
keep dragging and renaming while earlier commits are outstanding.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from timelane.domain.edits import Edit, NameEdit, apply_edit
from timelane.domain.events import (
    BeginRename,
    Blur,
    CancelDrag,
    InputEvent,
    KeyPress,
    PointerDown,
    PointerMove,
    PointerUp,
    TextInput,
    Zoom,
)
from timelane.domain.geometry import (
    DAY_WIDTH_PX,
    MIN_ITEM_WIDTH_PX,
    WINDOW_PADDING_DAYS,
    ItemGeometry,
    MonthLabel,
    TimeWindow,
    ZoomLevel,
    item_geometry,
    month_labels,
    timeline_width,
)
from timelane.domain.interaction import (
    Handle,
    InteractionController,
    InteractionState,
    MoveOutcome,
)
from timelane.domain.items import TimelineItem, find_item
from timelane.domain.lanes import assign_lanes, interval_depth
from timelane.services.reconcile import (
    ItemState,
    Policy,
    Reconciliation,
    ReconciliationClient,
    TimelineBackend,
)

if TYPE_CHECKING:
    from timelane.config.settings import TimelaneSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout (what a renderer draws)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlacedItem:
    item: TimelineItem
    lane: int
    geometry: ItemGeometry

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.item.to_record(),
            "lane": self.lane,
            "left": round(self.geometry.left, 2),
            "width": round(self.geometry.width, 2),
        }


@dataclass(frozen=True)
class TimelineLayout:
    """Everything a render pass needs, recomputed from scratch each time."""

    zoom: float
    window: TimeWindow | None
    width: float
    depth: int
    lanes: list[list[PlacedItem]] = field(default_factory=list)
    months: list[MonthLabel] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "zoom": round(self.zoom, 4),
            "min_date": self.window.min_date.isoformat() if self.window else None,
            "max_date": self.window.max_date.isoformat() if self.window else None,
            "width": round(self.width, 2),
            "depth": self.depth,
            "lanes": [[placed.to_dict() for placed in lane] for lane in self.lanes],
            "months": [{"label": m.label, "offset": round(m.offset, 2)} for m in self.months],
        }


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


class TimelineSession:
    """Interactive editing session. Create inside a running event loop."""

    def __init__(
        self,
        backend: TimelineBackend,
        *,
        zoom: ZoomLevel | None = None,
        day_width_px: float = DAY_WIDTH_PX,
        min_item_width_px: float = MIN_ITEM_WIDTH_PX,
        padding_days: int = WINDOW_PADDING_DAYS,
        policy: Policy = "replace",
        rollback_on_failure: bool = True,
    ) -> None:
        self._state = ItemState()
        self._client = ReconciliationClient(
            backend, self._state, policy=policy, rollback_on_failure=rollback_on_failure
        )
        self._controller = InteractionController(day_width_px=day_width_px)
        self._zoom = zoom or ZoomLevel()
        self._day_width_px = day_width_px
        self._min_item_width_px = min_item_width_px
        self._padding_days = padding_days
        self._tasks: set[asyncio.Task[Reconciliation]] = set()
        self._results: list[Reconciliation] = []

    @classmethod
    def from_settings(
        cls, backend: TimelineBackend, settings: TimelaneSettings, *, zoom: float | None = None
    ) -> TimelineSession:
        return cls(
            backend,
            zoom=settings.zoom.level(zoom),
            day_width_px=settings.timeline.day_width_px,
            min_item_width_px=settings.timeline.min_item_width_px,
            padding_days=settings.timeline.padding_days,
            policy=settings.reconcile.policy,
            rollback_on_failure=settings.reconcile.rollback_on_failure,
        )

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def items(self) -> tuple[TimelineItem, ...]:
        return self._state.items

    @property
    def zoom(self) -> ZoomLevel:
        return self._zoom

    @property
    def interaction(self) -> InteractionState:
        return self._controller.state

    @property
    def pending(self) -> int:
        return len(self._tasks)

    @property
    def results(self) -> list[Reconciliation]:
        """Completed reconciliations, in completion order."""
        return list(self._results)

    async def load(self) -> tuple[TimelineItem, ...]:
        return await self._client.load()

    # ------------------------------------------------------------------
    # Pointer
    # ------------------------------------------------------------------

    def pointer_down(self, item_id: int, handle: Handle | str, x: float) -> bool:
        item = find_item(self._state.items, item_id)
        if item is None:
            logger.debug("pointer_down on unknown item %s ignored", item_id)
            return False
        return self._controller.pointer_down(item, handle, x)

    def pointer_move(self, x: float) -> MoveOutcome:
        outcome = self._controller.pointer_move(x, self._state.items, self._zoom)
        if outcome.item is not None:
            self._state.put(outcome.item)
        elif outcome.rejected:
            logger.debug("drag delta of %s days rejected", outcome.days)
        return outcome

    def pointer_up(self) -> asyncio.Task[Reconciliation] | None:
        """End the drag and submit its final dates in the background."""
        edit = self._controller.pointer_up(self._state.items)
        if edit is None:
            return None
        return self._submit(edit)

    def cancel_drag(self) -> bool:
        origin = self._controller.cancel_drag()
        if origin is None:
            return False
        self._state.put(origin)
        return True

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    def begin_rename(self, item_id: int) -> bool:
        item = find_item(self._state.items, item_id)
        if item is None:
            return False
        return self._controller.begin_rename(item)

    def edit_text(self, text: str) -> None:
        self._controller.edit_text(text)

    def key(self, name: str) -> asyncio.Task[Reconciliation] | None:
        return self._commit_name(self._controller.key(name))

    def blur(self) -> asyncio.Task[Reconciliation] | None:
        return self._commit_name(self._controller.blur())

    def _commit_name(self, edit: NameEdit | None) -> asyncio.Task[Reconciliation] | None:
        if edit is None:
            return None
        if find_item(self._state.items, edit.item_id) is None:
            return None
        self._state.replace(apply_edit(self._state.items, edit))
        return self._submit(edit)

    # ------------------------------------------------------------------
    # Zoom
    # ------------------------------------------------------------------

    def zoom_in(self) -> ZoomLevel:
        self._zoom = self._zoom.zoom_in()
        return self._zoom

    def zoom_out(self) -> ZoomLevel:
        self._zoom = self._zoom.zoom_out()
        return self._zoom

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event: InputEvent) -> asyncio.Task[Reconciliation] | None:
        """Route a front-end event; returns the reconciliation task it started, if any."""
        match event:
            case PointerDown(item=item_id, handle=handle, x=x):
                self.pointer_down(item_id, handle, x)
            case PointerMove(x=x):
                self.pointer_move(x)
            case PointerUp():
                return self.pointer_up()
            case CancelDrag():
                self.cancel_drag()
            case Zoom(direction="in"):
                self.zoom_in()
            case Zoom():
                self.zoom_out()
            case BeginRename(item=item_id):
                self.begin_rename(item_id)
            case TextInput(text=text):
                self.edit_text(text)
            case KeyPress(key=key):
                return self.key(key)
            case Blur():
                return self.blur()
        return None

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def layout(self) -> TimelineLayout:
        items = self._state.items
        window = TimeWindow.from_items(items, padding_days=self._padding_days)
        if window is None:
            return TimelineLayout(zoom=self._zoom.value, window=None, width=0.0, depth=0)

        lanes = [
            [
                PlacedItem(
                    item=item,
                    lane=number,
                    geometry=item_geometry(
                        item,
                        window,
                        self._zoom,
                        day_width_px=self._day_width_px,
                        min_width_px=self._min_item_width_px,
                    ),
                )
                for item in lane
            ]
            for number, lane in enumerate(assign_lanes(items))
        ]
        return TimelineLayout(
            zoom=self._zoom.value,
            window=window,
            width=timeline_width(window, self._zoom, day_width_px=self._day_width_px),
            depth=interval_depth(items),
            lanes=lanes,
            months=list(month_labels(window, self._zoom, day_width_px=self._day_width_px)),
        )

    # ------------------------------------------------------------------
    # Background reconciliation
    # ------------------------------------------------------------------

    def _submit(self, edit: Edit) -> asyncio.Task[Reconciliation]:
        task = asyncio.get_running_loop().create_task(self._client.apply(edit))
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Reconciliation]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Reconciliation task crashed", exc_info=exc)
            return
        self._results.append(task.result())

    async def drain(self) -> list[Reconciliation]:
        """Wait for every outstanding reconciliation; returns all completed so far."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
        return self.results
