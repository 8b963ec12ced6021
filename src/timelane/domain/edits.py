"""Committed edits, as handed from the interaction engine to reconciliation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from timelane.domain.items import TimelineItem, find_item, replace_item


@dataclass(frozen=True)
class DateEdit:
    """Final dates of a resize or move."""

    item_id: int
    start: date
    end: date

    @property
    def kind(self) -> str:
        return "dates"


@dataclass(frozen=True)
class NameEdit:
    """Final text of a rename."""

    item_id: int
    name: str

    @property
    def kind(self) -> str:
        return "name"


Edit = DateEdit | NameEdit


def apply_edit(items: Iterable[TimelineItem], edit: Edit) -> tuple[TimelineItem, ...]:
    """Apply *edit* locally, returning a new collection.

    Unknown target ids leave the collection unchanged.
    """
    items = tuple(items)
    target = find_item(items, edit.item_id)
    if target is None:
        return items
    if isinstance(edit, DateEdit):
        return replace_item(items, target.with_dates(edit.start, edit.end))
    return replace_item(items, target.with_name(edit.name))
