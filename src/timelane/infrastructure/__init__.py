"""Infrastructure layer: SQLite storage for timeline items.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It must never import from services, commands, or output; the only
domain import allowed is the item value type it persists.
"""
