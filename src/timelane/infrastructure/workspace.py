"""Workspace — the directory a timeline lives in, and its store.

The Workspace is the single dependency injected into every service. The
store is opened lazily so that ``--help`` and config errors never touch
the database.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from timelane.infrastructure.database.engine import db_path_for
from timelane.infrastructure.store import TimelineStore

if TYPE_CHECKING:
    from timelane.config.settings import TimelaneSettings


class Workspace:
    """Settings plus a lazily opened :class:`TimelineStore`."""

    def __init__(self, settings: TimelaneSettings) -> None:
        self._settings = settings
        self._store: TimelineStore | None = None

    @property
    def settings(self) -> TimelaneSettings:
        return self._settings

    @property
    def root(self) -> Path:
        return self._settings.root

    @property
    def db_path(self) -> Path:
        return db_path_for(self.root)

    @property
    def is_initialized(self) -> bool:
        return self.db_path.is_file()

    @property
    def store(self) -> TimelineStore:
        """The item store (created on first access, initializing the DB)."""
        if self._store is None:
            self._store = TimelineStore.open(self.root)
        return self._store

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None
