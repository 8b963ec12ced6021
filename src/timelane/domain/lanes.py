"""Lane assignment — pack date intervals into non-overlapping horizontal lanes.

Greedy first-fit in start order. Processing intervals by start date makes
first-fit optimal: the lane count equals the interval depth of the input,
which is a lower bound for any packing.

Intervals are half-open ``[start, end)``: an item ending on day D and an
item starting on day D share a lane. A zero-width item on day D fits
after anything ending on or before D and before anything starting on D.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Protocol, TypeVar


class Interval(Protocol):
    """Anything with an ``id`` and a ``start``/``end`` date pair."""

    @property
    def id(self) -> int: ...

    @property
    def start(self) -> date: ...

    @property
    def end(self) -> date: ...


_T = TypeVar("_T", bound=Interval)

# Sweep event kinds, in processing order for a shared date.
_END = 0
_POINT = 1
_START = 2


def _effective_end(item: Interval) -> date:
    # Inverted ranges should never reach here, but must not break packing.
    return max(item.start, item.end)


def _sort_key(item: Interval) -> tuple[date, bool, int]:
    # Zero-width items go first among equal starts; otherwise id breaks ties.
    return (item.start, _effective_end(item) > item.start, item.id)


def assign_lanes(items: Iterable[_T]) -> list[list[_T]]:
    """Assign every item to exactly one lane, minimizing the number of lanes.

    Returns lanes in creation order; each lane lists its items in start
    order. The result depends only on the set of items, not their input
    order.
    """
    lanes: list[list[_T]] = []
    lane_ends: list[date] = []

    for item in sorted(items, key=_sort_key):
        for idx, lane_end in enumerate(lane_ends):
            if lane_end <= item.start:
                lanes[idx].append(item)
                lane_ends[idx] = _effective_end(item)
                break
        else:
            lanes.append([item])
            lane_ends.append(_effective_end(item))

    return lanes


def interval_depth(items: Iterable[Interval]) -> int:
    """Largest number of items that pairwise cannot share a lane.

    For ordinary items this is the maximum number of ``[start, end)``
    intervals active at once. A zero-width item on day D adds one on top of
    the items strictly spanning D (``start < D < end``).
    """
    events: list[tuple[date, int]] = []
    for item in items:
        start, end = item.start, _effective_end(item)
        if start == end:
            events.append((start, _POINT))
        else:
            events.append((start, _START))
            events.append((end, _END))

    depth = 0
    active = 0
    for _, kind in sorted(events):
        if kind == _END:
            active -= 1
        elif kind == _POINT:
            depth = max(depth, active + 1)
        else:
            active += 1
            depth = max(depth, active)
    return depth


def lane_index(lanes: Sequence[Sequence[Interval]]) -> dict[int, int]:
    """Map item id to the lane number it was placed in."""
    return {item.id: number for number, lane in enumerate(lanes) for item in lane}
