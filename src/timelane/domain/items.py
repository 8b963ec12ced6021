"""TimelineItem — the immutable value behind every bar on the timeline.

Items are never mutated in place. Every edit (drag, resize, rename,
reconciliation) produces a replacement value, and collections of items are
replaced wholesale rather than patched.

Dates cross the persistence boundary as ISO ``YYYY-MM-DD`` strings; inside
the process they are :class:`datetime.date` values.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta
from typing import Any, Self

from pydantic import BaseModel, field_serializer, model_validator


class TimelineItem(BaseModel):
    """A named, date-ranged timeline entry.

    INVARIANT: ``start <= end``. Zero-duration items (``start == end``)
    are valid; inverted ranges are rejected at construction.
    """

    model_config = {"frozen": True}

    id: int
    name: str
    start: date
    end: date

    @model_validator(mode="after")
    def _check_range(self) -> Self:
        if self.start > self.end:
            msg = f"start {self.start.isoformat()} is after end {self.end.isoformat()}"
            raise ValueError(msg)
        return self

    @field_serializer("start", "end")
    def _serialize_date(self, value: date) -> str:
        return value.isoformat()

    @property
    def duration_days(self) -> int:
        return (self.end - self.start).days

    def with_dates(self, start: date, end: date) -> TimelineItem:
        """Return a copy with new dates (validated)."""
        return TimelineItem(id=self.id, name=self.name, start=start, end=end)

    def with_name(self, name: str) -> TimelineItem:
        return self.model_copy(update={"name": name})

    def shifted(self, days: int) -> TimelineItem:
        """Return a copy moved by *days*, duration unchanged."""
        delta = timedelta(days=days)
        return self.model_copy(update={"start": self.start + delta, "end": self.end + delta})

    def to_record(self) -> dict[str, Any]:
        """Wire form: ``{"id", "name", "start", "end"}`` with ISO dates."""
        return self.model_dump()


def items_from_records(records: Iterable[Mapping[str, Any]]) -> tuple[TimelineItem, ...]:
    """Validate wire records into items, preserving order."""
    return tuple(TimelineItem.model_validate(dict(r)) for r in records)


def items_to_records(items: Iterable[TimelineItem]) -> list[dict[str, Any]]:
    return [item.to_record() for item in items]


def find_item(items: Iterable[TimelineItem], item_id: int) -> TimelineItem | None:
    """Return the item with *item_id*, or None."""
    for item in items:
        if item.id == item_id:
            return item
    return None


def replace_item(
    items: Iterable[TimelineItem], replacement: TimelineItem
) -> tuple[TimelineItem, ...]:
    """Return a new collection with the item sharing *replacement*'s id swapped in.

    No-op (same membership) when no item carries that id.
    """
    return tuple(replacement if item.id == replacement.id else item for item in items)
