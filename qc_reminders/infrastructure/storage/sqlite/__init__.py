"""SQLite storage implementations."""

from qc_reminders.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from qc_reminders.infrastructure.storage.sqlite.reminder_store import SQLiteReminderStore

# Singleton instances
_reminder_store: SQLiteReminderStore | None = None


async def get_reminder_store() -> SQLiteReminderStore:
    """Get singleton reminder store instance."""
    global _reminder_store
    if _reminder_store is None:
        _reminder_store = SQLiteReminderStore()
    return _reminder_store


__all__ = [
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "SQLiteReminderStore",
    "get_reminder_store",
]
