"""SQLite database engine and schema via SQLAlchemy Core."""

from timelane.infrastructure.database.engine import create_db_engine, db_path_for, init_database
from timelane.infrastructure.database.schema import items, metadata

__all__ = [
    "create_db_engine",
    "db_path_for",
    "init_database",
    "items",
    "metadata",
]
