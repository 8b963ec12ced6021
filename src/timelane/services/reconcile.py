"""Optimistic local edits reconciled against an asynchronous backend.

Callers mutate :class:`ItemState` first (the screen never waits on
storage), then hand the committed edit to :meth:`ReconciliationClient.apply`,
which submits it and folds the authoritative response back in.

Policies:

- ``replace`` (default): the whole local collection is swapped for the
  backend's. Several edits may be in flight at once; whichever response
  arrives last wins, even if its edit was issued first, and any other
  unconfirmed local change is overwritten. Out-of-order arrivals are
  logged as stale.
- ``merge``: only the edited item is taken from the response, so
  concurrent local edits to other items survive.

On backend failure the error is logged and, when ``rollback_on_failure``
is set, local state returns to the last authoritative collection.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Protocol

import structlog

from timelane.domain.edits import DateEdit, Edit
from timelane.domain.items import TimelineItem, find_item, items_from_records, replace_item

if TYPE_CHECKING:
    from timelane.infrastructure.store import TimelineStore

log = structlog.get_logger(__name__)

Record = dict[str, Any]
Policy = Literal["replace", "merge"]


class TimelineBackend(Protocol):
    """Persistence collaborator. Dates travel as ISO ``YYYY-MM-DD`` strings."""

    async def fetch_all(self) -> list[Record]: ...

    async def update_dates(self, item_id: int, start: str, end: str) -> list[Record]: ...

    async def update_name(self, item_id: int, name: str) -> list[Record]: ...


class StoreBackend:
    """Runs a :class:`TimelineStore` off the event loop."""

    def __init__(self, store: TimelineStore) -> None:
        self._store = store

    async def fetch_all(self) -> list[Record]:
        return await asyncio.to_thread(self._store.fetch_all)

    async def update_dates(self, item_id: int, start: str, end: str) -> list[Record]:
        return await asyncio.to_thread(self._store.update_dates, item_id, start, end)

    async def update_name(self, item_id: int, name: str) -> list[Record]:
        return await asyncio.to_thread(self._store.update_name, item_id, name)


class ItemState:
    """The session's single item collection, replaced wholesale on every change.

    Also remembers the last collection confirmed by the backend, which is
    what a failed edit rolls back to.
    """

    def __init__(self, items: Iterable[TimelineItem] = ()) -> None:
        self._items: tuple[TimelineItem, ...] = tuple(items)
        self._authoritative = self._items

    @property
    def items(self) -> tuple[TimelineItem, ...]:
        return self._items

    @property
    def authoritative(self) -> tuple[TimelineItem, ...]:
        return self._authoritative

    def replace(self, items: Iterable[TimelineItem]) -> None:
        """Local (optimistic) replacement."""
        self._items = tuple(items)

    def put(self, item: TimelineItem) -> None:
        """Local replacement of the single item sharing *item*'s id."""
        self._items = replace_item(self._items, item)

    def confirm(self, items: Iterable[TimelineItem]) -> None:
        """Adopt *items* as both the visible and the authoritative collection."""
        self._items = tuple(items)
        self._authoritative = self._items

    def confirm_authoritative(self, items: Iterable[TimelineItem]) -> None:
        """Record *items* as the backend's view without touching visible state."""
        self._authoritative = tuple(items)

    def rollback(self) -> tuple[TimelineItem, ...]:
        self._items = self._authoritative
        return self._items


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of one :meth:`ReconciliationClient.apply` call.

    ``items`` is the local collection right after the outcome was folded in.
    """

    edit: Edit
    seq: int
    ok: bool
    items: tuple[TimelineItem, ...]
    error: str | None = None
    stale: bool = False
    rolled_back: bool = False


class ReconciliationClient:
    """Submits committed edits and reconciles local state with the responses."""

    def __init__(
        self,
        backend: TimelineBackend,
        state: ItemState,
        *,
        policy: Policy = "replace",
        rollback_on_failure: bool = True,
    ) -> None:
        self._backend = backend
        self._state = state
        self._policy = policy
        self._rollback_on_failure = rollback_on_failure
        self._issued = 0
        self._latest_applied = 0
        self._in_flight = 0

    @property
    def pending(self) -> int:
        """Number of edits submitted but not yet resolved."""
        return self._in_flight

    async def load(self) -> tuple[TimelineItem, ...]:
        """Initial fetch; the result becomes the authoritative collection."""
        items = items_from_records(await self._backend.fetch_all())
        self._state.confirm(items)
        log.debug("reconcile.loaded", count=len(items))
        return items

    async def apply(self, edit: Edit) -> Reconciliation:
        """Submit *edit* and fold the backend's answer into local state.

        Never raises for backend failures; they come back as ``ok=False``.
        """
        self._issued += 1
        seq = self._issued
        bound = log.bind(seq=seq, item_id=edit.item_id, kind=edit.kind)
        bound.debug("reconcile.submit")

        self._in_flight += 1
        try:
            records = await self._submit(edit)
            authoritative = items_from_records(records)
        except Exception as exc:
            bound.warning("reconcile.failed", error=str(exc), exc_type=type(exc).__name__)
            rolled_back = False
            if self._rollback_on_failure:
                self._state.rollback()
                rolled_back = True
            return Reconciliation(
                edit=edit,
                seq=seq,
                ok=False,
                items=self._state.items,
                error=str(exc) or type(exc).__name__,
                rolled_back=rolled_back,
            )
        finally:
            self._in_flight -= 1

        stale = seq < self._latest_applied
        if stale:
            bound.warning("reconcile.stale_response", latest_applied=self._latest_applied)
        self._latest_applied = max(self._latest_applied, seq)

        if self._policy == "merge":
            self._merge(edit, authoritative)
        else:
            self._state.confirm(authoritative)

        bound.debug("reconcile.applied", policy=self._policy, count=len(self._state.items))
        return Reconciliation(edit=edit, seq=seq, ok=True, items=self._state.items, stale=stale)

    async def _submit(self, edit: Edit) -> list[Record]:
        if isinstance(edit, DateEdit):
            return await self._backend.update_dates(
                edit.item_id, edit.start.isoformat(), edit.end.isoformat()
            )
        return await self._backend.update_name(edit.item_id, edit.name)

    def _merge(self, edit: Edit, authoritative: tuple[TimelineItem, ...]) -> None:
        confirmed = find_item(authoritative, edit.item_id)
        local = self._state.items
        if confirmed is not None:
            local = replace_item(local, confirmed)
        self._state.replace(local)
        self._state.confirm_authoritative(authoritative)
