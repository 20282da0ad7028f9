"""Database layer - session management, base models, and mixins."""

from gatekeeper.core.database.base import Base, TimestampMixin, UUIDMixin
from gatekeeper.core.database.session import Database, get_db


__all__ = [
    "Base",
    "Database",
    "TimestampMixin",
    "UUIDMixin",
    "get_db",
]
