"""Coordinate mapping between calendar days and horizontal pixels.

Forward: item → (left, width) under a :class:`TimeWindow` and
:class:`ZoomLevel`. Inverse: pointer pixel delta → whole-day delta.
The system has day granularity; nothing here produces sub-day dates.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, timedelta

from timelane.domain.lanes import Interval

DAY_WIDTH_PX = 24
MIN_ITEM_WIDTH_PX = 80
WINDOW_PADDING_DAYS = 7

ZOOM_MIN = 0.5
ZOOM_MAX = 5.0
ZOOM_STEP = 1.2


# ---------------------------------------------------------------------------
# Zoom
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ZoomLevel:
    """Scalar day→pixel multiplier, clamped to ``[minimum, maximum]``."""

    value: float = 1.0
    minimum: float = ZOOM_MIN
    maximum: float = ZOOM_MAX
    step: float = ZOOM_STEP

    def __post_init__(self) -> None:
        if not 0 < self.minimum <= self.maximum:
            msg = f"Invalid zoom bounds: [{self.minimum}, {self.maximum}]"
            raise ValueError(msg)
        if self.step <= 1:
            msg = f"Zoom step must be greater than 1, got {self.step}"
            raise ValueError(msg)
        object.__setattr__(self, "value", self._clamp(self.value))

    def _clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))

    def zoom_in(self) -> ZoomLevel:
        return ZoomLevel(self.value * self.step, self.minimum, self.maximum, self.step)

    def zoom_out(self) -> ZoomLevel:
        return ZoomLevel(self.value / self.step, self.minimum, self.maximum, self.step)

    def at(self, value: float) -> ZoomLevel:
        """Same bounds and step, different (clamped) value."""
        return ZoomLevel(value, self.minimum, self.maximum, self.step)


# ---------------------------------------------------------------------------
# Time window
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimeWindow:
    """Coordinate origin and extent, derived from the item set."""

    min_date: date
    max_date: date

    @classmethod
    def from_items(
        cls,
        items: Iterable[Interval],
        *,
        padding_days: int = WINDOW_PADDING_DAYS,
    ) -> TimeWindow | None:
        """Pad the items' overall span by *padding_days* on both sides.

        Returns None for an empty collection (there is nothing to anchor to).
        """
        starts: list[date] = []
        ends: list[date] = []
        for item in items:
            starts.append(item.start)
            ends.append(max(item.start, item.end))
        if not starts:
            return None
        padding = timedelta(days=padding_days)
        return cls(min_date=min(starts) - padding, max_date=max(ends) + padding)

    @property
    def total_days(self) -> int:
        return (self.max_date - self.min_date).days


@dataclass(frozen=True)
class ItemGeometry:
    """Horizontal placement of one item, in pixels."""

    left: float
    width: float


@dataclass(frozen=True)
class MonthLabel:
    label: str
    offset: float


def _scale(day_width_px: float, zoom: ZoomLevel | float) -> float:
    value = zoom.value if isinstance(zoom, ZoomLevel) else zoom
    return day_width_px * value


def days_to_px(days: int, zoom: ZoomLevel | float, *, day_width_px: float = DAY_WIDTH_PX) -> float:
    return days * _scale(day_width_px, zoom)


def item_geometry(
    item: Interval,
    window: TimeWindow,
    zoom: ZoomLevel | float,
    *,
    day_width_px: float = DAY_WIDTH_PX,
    min_width_px: float = MIN_ITEM_WIDTH_PX,
) -> ItemGeometry:
    """Pixel offset from the window origin and rendered width.

    The minimum width keeps short items grabbable; it never feeds back
    into date computation.
    """
    offset_days = (item.start - window.min_date).days
    span_days = (max(item.start, item.end) - item.start).days
    return ItemGeometry(
        left=days_to_px(offset_days, zoom, day_width_px=day_width_px),
        width=max(days_to_px(span_days, zoom, day_width_px=day_width_px), min_width_px),
    )


def timeline_width(
    window: TimeWindow, zoom: ZoomLevel | float, *, day_width_px: float = DAY_WIDTH_PX
) -> float:
    return days_to_px(window.total_days, zoom, day_width_px=day_width_px)


def day_delta(
    pixel_delta: float, zoom: ZoomLevel | float, *, day_width_px: float = DAY_WIDTH_PX
) -> int:
    """Convert a pointer pixel delta into a whole number of days.

    Halves round up (toward positive infinity), so a drag of exactly half
    a day to the right counts as one day and half a day to the left as none.
    """
    return math.floor(pixel_delta / _scale(day_width_px, zoom) + 0.5)


def _next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def month_labels(
    window: TimeWindow,
    zoom: ZoomLevel | float,
    *,
    day_width_px: float = DAY_WIDTH_PX,
) -> Iterator[MonthLabel]:
    """Yield one label per month touched by the window.

    The first label sits at the window origin (which is usually mid-month);
    each following label is anchored on the first of its month. Iteration
    stops once the month start passes ``max_date``.
    """
    current = window.min_date
    while current <= window.max_date:
        offset_days = (current - window.min_date).days
        yield MonthLabel(
            label=current.strftime("%b %Y"),
            offset=days_to_px(offset_days, zoom, day_width_px=day_width_px),
        )
        current = _next_month(current)
