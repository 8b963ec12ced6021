"""Pointer/keyboard interaction state machine for editing timeline items.

One explicit tagged state replaces a bundle of independent flags, so
illegal combinations (dragging while renaming, a drag with no target)
cannot be represented:

    Idle ──pointer_down(handle)──▶ Dragging(mode, item_id, anchor_x)
    Dragging ──pointer_move──▶ Dragging        (anchor moves on whole-day deltas)
    Dragging ──pointer_up──▶ Idle              (emits DateEdit)
    Dragging ──cancel_drag──▶ Idle             (restores the pre-drag item)
    Idle ──begin_rename──▶ Renaming(item_id, buffer)
    Renaming ──key("Enter") / blur──▶ Idle     (emits NameEdit)

Events that do not apply to the current state are ignored.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum

from timelane.domain.edits import DateEdit, NameEdit
from timelane.domain.geometry import DAY_WIDTH_PX, ZoomLevel, day_delta
from timelane.domain.items import TimelineItem, find_item


class DragMode(StrEnum):
    """What a drag does to its target."""

    RESIZE_START = "resize-start"
    RESIZE_END = "resize-end"
    MOVE = "move"


class Handle(StrEnum):
    """Drag affordance the pointer went down on."""

    START = "start"
    END = "end"
    BODY = "body"


HANDLE_MODES: dict[Handle, DragMode] = {
    Handle.START: DragMode.RESIZE_START,
    Handle.END: DragMode.RESIZE_END,
    Handle.BODY: DragMode.MOVE,
}

CONFIRM_KEY = "Enter"


# --- States ---


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    mode: DragMode
    item_id: int
    anchor_x: float
    origin: TimelineItem


@dataclass(frozen=True)
class Renaming:
    item_id: int
    buffer: str


InteractionState = Idle | Dragging | Renaming

IDLE = Idle()


@dataclass(frozen=True)
class MoveOutcome:
    """Result of one pointer-move.

    ``days`` is the whole-day delta read from the pointer (0 when the
    motion stayed under a day). ``item`` is the replacement item when the
    delta was accepted, None when nothing changed.
    """

    days: int = 0
    item: TimelineItem | None = None

    @property
    def rejected(self) -> bool:
        return self.days != 0 and self.item is None


def propose(item: TimelineItem, mode: DragMode, days: int) -> TimelineItem | None:
    """Apply the drag policy for a nonzero *days* delta.

    Resizes must keep ``start < end`` strictly; a move shifts both ends and
    stays valid while both land inside the calendar. Returns None when the
    proposal is rejected, including deltas that leave the representable
    date range.
    """
    try:
        if mode is DragMode.MOVE:
            return item.shifted(days)
        delta = timedelta(days=days)
        if mode is DragMode.RESIZE_START:
            new_start = item.start + delta
            return item.with_dates(new_start, item.end) if new_start < item.end else None
        new_end = item.end + delta
        return item.with_dates(item.start, new_end) if new_end > item.start else None
    except OverflowError:
        return None


class InteractionController:
    """Tracks the single active drag or rename session.

    Pure computation only: callers own the item collection and pass the
    current one in; the controller returns replacement items and commits.
    """

    def __init__(self, *, day_width_px: float = DAY_WIDTH_PX) -> None:
        self._day_width_px = day_width_px
        self._state: InteractionState = IDLE

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, Idle)

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------

    def pointer_down(self, item: TimelineItem, handle: Handle | str, x: float) -> bool:
        """Start a drag on *item*.

        Returns False if a session is already active or *x* is not finite.
        """
        if not self.is_idle or not math.isfinite(x):
            return False
        mode = HANDLE_MODES[Handle(handle)]
        self._state = Dragging(mode=mode, item_id=item.id, anchor_x=x, origin=item)
        return True

    def pointer_move(
        self,
        x: float,
        items: Iterable[TimelineItem],
        zoom: ZoomLevel | float,
    ) -> MoveOutcome:
        """Interpret pointer motion to *x* against the current *items*.

        Sub-day motion leaves the anchor in place so it can accumulate. Any
        whole-day delta advances the anchor, even when validity rejects it.
        """
        state = self._state
        if not isinstance(state, Dragging):
            return MoveOutcome()

        offset = x - state.anchor_x
        if not math.isfinite(offset):
            return MoveOutcome()
        days = day_delta(offset, zoom, day_width_px=self._day_width_px)
        if days == 0:
            return MoveOutcome()

        self._state = Dragging(
            mode=state.mode, item_id=state.item_id, anchor_x=x, origin=state.origin
        )
        current = find_item(items, state.item_id)
        if current is None:
            return MoveOutcome(days=days)
        return MoveOutcome(days=days, item=propose(current, state.mode, days))

    def pointer_up(self, items: Iterable[TimelineItem]) -> DateEdit | None:
        """End the drag, returning the commit for the target's final dates.

        Returns None when no drag is active or the target has disappeared.
        """
        state = self._state
        if not isinstance(state, Dragging):
            return None
        self._state = IDLE
        final = find_item(items, state.item_id)
        if final is None:
            return None
        return DateEdit(item_id=final.id, start=final.start, end=final.end)

    def cancel_drag(self) -> TimelineItem | None:
        """Abandon the drag without committing; returns the pre-drag item."""
        state = self._state
        if not isinstance(state, Dragging):
            return None
        self._state = IDLE
        return state.origin

    # ------------------------------------------------------------------
    # Rename
    # ------------------------------------------------------------------

    def begin_rename(self, item: TimelineItem) -> bool:
        if not self.is_idle:
            return False
        self._state = Renaming(item_id=item.id, buffer=item.name)
        return True

    def edit_text(self, text: str) -> None:
        """Replace the pending text. Ignored outside a rename."""
        if isinstance(self._state, Renaming):
            self._state = Renaming(item_id=self._state.item_id, buffer=text)

    def key(self, name: str) -> NameEdit | None:
        """Handle a key press; only the confirm key commits."""
        if name == CONFIRM_KEY:
            return self._commit_rename()
        return None

    def blur(self) -> NameEdit | None:
        return self._commit_rename()

    def _commit_rename(self) -> NameEdit | None:
        state = self._state
        if not isinstance(state, Renaming):
            return None
        self._state = IDLE
        return NameEdit(item_id=state.item_id, name=state.buffer)
