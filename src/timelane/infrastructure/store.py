"""TimelineStore — durable item storage with point updates by id.

Every mutating call returns the full, authoritative collection after the
change, ordered by id. Updates that name an unknown id change nothing
and still return the collection.

Records are plain dicts ``{"id", "name", "start", "end"}`` with ISO date
strings; conversion to domain values happens on the caller's side.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import UTC, date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

from timelane.infrastructure.database.engine import init_database
from timelane.infrastructure.database.schema import items

if TYPE_CHECKING:
    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

Record = dict[str, Any]


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _parse_iso(value: str, field: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid {field} date: {value!r} (expected YYYY-MM-DD)"
        raise ValueError(msg) from exc


def _check_range(start: str, end: str) -> tuple[str, str]:
    """Validate an ISO date pair, returning it normalized."""
    start_d = _parse_iso(start, "start")
    end_d = _parse_iso(end, "end")
    if start_d > end_d:
        msg = f"start {start} is after end {end}"
        raise ValueError(msg)
    return start_d.isoformat(), end_d.isoformat()


class TimelineStore:
    """SQLite-backed item store. One instance per workspace."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @classmethod
    def open(cls, root: Path) -> TimelineStore:
        """Open (creating if needed) the store for the workspace at *root*."""
        return cls(init_database(root))

    @property
    def engine(self) -> Engine:
        return self._engine

    def close(self) -> None:
        self._engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Connection inside ``engine.begin()``: commit on success, rollback on error."""
        with self._engine.begin() as conn:
            yield conn

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_all(self) -> list[Record]:
        with self._engine.connect() as conn:
            return self._fetch_all(conn)

    def get(self, item_id: int) -> Record | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                select(items.c.id, items.c.name, items.c.start, items.c.end).where(
                    items.c.id == item_id
                )
            ).first()
        return dict(row._mapping) if row is not None else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update_dates(self, item_id: int, start: str, end: str) -> list[Record]:
        """Set the dates of *item_id*; returns the full collection.

        Raises:
            ValueError: If either date is malformed or ``start > end``.
        """
        start, end = _check_range(start, end)
        with self.transaction() as conn:
            changed = conn.execute(
                update(items)
                .where(items.c.id == item_id)
                .values(start=start, end=end, modified=_now_iso())
            ).rowcount
            logger.debug("update_dates id=%s rows=%s %s..%s", item_id, changed, start, end)
            return self._fetch_all(conn)

    def update_name(self, item_id: int, name: str) -> list[Record]:
        """Set the name of *item_id*; returns the full collection."""
        with self.transaction() as conn:
            changed = conn.execute(
                update(items).where(items.c.id == item_id).values(name=name, modified=_now_iso())
            ).rowcount
            logger.debug("update_name id=%s rows=%s", item_id, changed)
            return self._fetch_all(conn)

    def add_items(self, records: Iterable[Mapping[str, Any]]) -> int:
        """Insert records, replacing any existing row with the same id.

        All-or-nothing: a single invalid record aborts the whole batch.
        Returns the number of records written.
        """
        now = _now_iso()
        count = 0
        with self.transaction() as conn:
            for record in records:
                try:
                    item_id = int(record["id"])
                    name = str(record["name"])
                    start, end = _check_range(record["start"], record["end"])
                except KeyError as exc:
                    msg = f"Record is missing field {exc.args[0]!r}: {dict(record)!r}"
                    raise ValueError(msg) from exc
                except TypeError as exc:
                    msg = f"Malformed record: {dict(record)!r}"
                    raise ValueError(msg) from exc

                exists = conn.execute(select(items.c.id).where(items.c.id == item_id)).first()
                if exists is None:
                    conn.execute(
                        insert(items).values(
                            id=item_id, name=name, start=start, end=end, created=now, modified=now
                        )
                    )
                else:
                    conn.execute(
                        update(items)
                        .where(items.c.id == item_id)
                        .values(name=name, start=start, end=end, modified=now)
                    )
                count += 1
        return count

    @staticmethod
    def _fetch_all(conn: Connection) -> list[Record]:
        rows = conn.execute(
            select(items.c.id, items.c.name, items.c.start, items.c.end).order_by(items.c.id)
        ).fetchall()
        return [dict(row._mapping) for row in rows]
