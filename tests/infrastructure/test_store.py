"""Tests for TimelineStore."""

from __future__ import annotations

from typing import Any

import pytest

from timelane.infrastructure.store import TimelineStore


class TestReads:
    def test_empty(self, store: TimelineStore) -> None:
        assert store.fetch_all() == []

    def test_fetch_all_ordered_by_id(
        self, store: TimelineStore, sample_records: list[dict[str, Any]]
    ) -> None:
        store.add_items(reversed(sample_records))
        assert store.fetch_all() == sample_records

    def test_get(self, store: TimelineStore, sample_records: list[dict[str, Any]]) -> None:
        store.add_items(sample_records)
        assert store.get(2) == sample_records[1]
        assert store.get(99) is None


class TestUpdates:
    @pytest.fixture(autouse=True)
    def _seed(self, store: TimelineStore, sample_records: list[dict[str, Any]]) -> None:
        store.add_items(sample_records)

    def test_update_dates_returns_full_collection(self, store: TimelineStore) -> None:
        records = store.update_dates(1, "2024-01-01", "2024-01-13")
        assert len(records) == 3
        assert records[0]["end"] == "2024-01-13"
        assert store.get(1)["end"] == "2024-01-13"  # type: ignore[index]

    def test_update_dates_unknown_id_is_noop(self, store: TimelineStore) -> None:
        before = store.fetch_all()
        assert store.update_dates(42, "2024-01-01", "2024-01-02") == before

    def test_update_dates_rejects_inverted_range(self, store: TimelineStore) -> None:
        with pytest.raises(ValueError, match="after end"):
            store.update_dates(1, "2024-02-01", "2024-01-01")
        assert store.get(1)["end"] == "2024-01-10"  # type: ignore[index]

    def test_update_dates_rejects_malformed(self, store: TimelineStore) -> None:
        with pytest.raises(ValueError, match="Invalid start date"):
            store.update_dates(1, "01/02/2024", "2024-01-10")

    def test_zero_width_range_accepted(self, store: TimelineStore) -> None:
        records = store.update_dates(1, "2024-01-05", "2024-01-05")
        assert records[0]["start"] == records[0]["end"] == "2024-01-05"

    def test_update_name(self, store: TimelineStore) -> None:
        records = store.update_name(2, "Design review")
        assert records[1]["name"] == "Design review"

    def test_update_name_unknown_id_is_noop(self, store: TimelineStore) -> None:
        before = store.fetch_all()
        assert store.update_name(42, "ghost") == before

    def test_modified_timestamp_changes(self, store: TimelineStore) -> None:
        from sqlalchemy import select

        from timelane.infrastructure.database.schema import items

        with store.engine.connect() as conn:
            before = conn.execute(select(items.c.modified).where(items.c.id == 3)).scalar()
        store.update_name(3, "Build v2")
        with store.engine.connect() as conn:
            after = conn.execute(select(items.c.modified).where(items.c.id == 3)).scalar()
        assert after >= before


class TestAddItems:
    def test_returns_count(
        self, store: TimelineStore, sample_records: list[dict[str, Any]]
    ) -> None:
        assert store.add_items(sample_records) == 3

    def test_replaces_existing_id(self, store: TimelineStore) -> None:
        store.add_items([{"id": 1, "name": "a", "start": "2024-01-01", "end": "2024-01-02"}])
        store.add_items([{"id": 1, "name": "b", "start": "2024-02-01", "end": "2024-02-02"}])
        assert store.fetch_all() == [
            {"id": 1, "name": "b", "start": "2024-02-01", "end": "2024-02-02"}
        ]

    def test_all_or_nothing(self, store: TimelineStore) -> None:
        batch = [
            {"id": 1, "name": "ok", "start": "2024-01-01", "end": "2024-01-02"},
            {"id": 2, "name": "bad", "start": "2024-01-09", "end": "2024-01-02"},
        ]
        with pytest.raises(ValueError):
            store.add_items(batch)
        assert store.fetch_all() == []

    def test_missing_field(self, store: TimelineStore) -> None:
        with pytest.raises(ValueError, match="missing field 'end'"):
            store.add_items([{"id": 1, "name": "x", "start": "2024-01-01"}])

    def test_non_integer_id(self, store: TimelineStore) -> None:
        with pytest.raises(ValueError):
            store.add_items(
                [{"id": "one", "name": "x", "start": "2024-01-01", "end": "2024-01-02"}]
            )


class TestTransaction:
    def test_rolls_back_on_error(self, store: TimelineStore) -> None:
        from sqlalchemy import insert

        from timelane.infrastructure.database.schema import items

        with pytest.raises(RuntimeError), store.transaction() as conn:
            conn.execute(
                insert(items).values(
                    id=1, name="x", start="2024-01-01", end="2024-01-02", created="", modified=""
                )
            )
            raise RuntimeError("boom")
        assert store.fetch_all() == []
