"""SQLAlchemy Core table definitions for the timelane database.

Dates are stored as ISO ``YYYY-MM-DD`` text, the same form they take on
the wire, so stored values sort chronologically.
"""

from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

items = Table(
    "items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("name", Text, nullable=False),
    Column("start", Text, nullable=False),
    Column("end", Text, nullable=False),
    Column("created", Text, nullable=False),  # audit timestamps (DB-only)
    Column("modified", Text, nullable=False),
)

Index("ix_items_start", items.c.start)
