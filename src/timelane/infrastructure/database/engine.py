"""Database engine setup for SQLite with WAL mode.

The DB is stored at ``{root}/.timelane/timelane.db``. SQLAlchemy Core
(not ORM) is used: the store only ever reads whole collections and
updates single rows by id.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from timelane.infrastructure.database.schema import metadata

DATA_DIR = ".timelane"
DB_FILENAME = "timelane.db"


def db_path_for(root: Path) -> Path:
    """Location of the database for a workspace rooted at *root*."""
    return root / DATA_DIR / DB_FILENAME


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(root: Path) -> Engine:
    """Initialize the timelane database under *root*.

    Creates the ``.timelane/`` directory and all tables. Idempotent, so safe
    to call on an existing workspace. Returns the engine ready for use.
    """
    path = db_path_for(root)
    path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(path)
    metadata.create_all(engine)
    return engine
