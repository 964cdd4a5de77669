"""
SQLite implementation of reminder storage.

Handles owner-scoped CRUD for reminders. The entity's status variant is
flattened into is_active/is_snoozed/snooze_until/completed_at columns.
"""

import json
from collections.abc import Iterable
from datetime import datetime, time

import aiosqlite

from qc_reminders.config import get_logger
from qc_reminders.core.entities.reminder import (
    ActiveState,
    CompletedState,
    InactiveState,
    Reminder,
    ReminderCategory,
    ReminderFrequency,
    ReminderState,
    SnoozedState,
)
from qc_reminders.core.exceptions import PersistenceError, ReminderNotFoundError
from qc_reminders.core.interfaces.storage import IReminderStore
from qc_reminders.infrastructure.storage.sqlite.connection import ConnectionPool, get_pool

logger = get_logger(__name__)

_COLUMNS = (
    "id, user_id, title, message, category, frequency, scheduled_for, "
    "time_of_day, days_of_week, day_of_month, is_active, is_snoozed, "
    "snooze_until, completed_at, last_notified_at, created_at, updated_at"
)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class SQLiteReminderStore(IReminderStore):
    """SQLite implementation of reminder storage."""

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    async def _get_pool(self) -> ConnectionPool:
        # Without an explicit pool, follow the global one across close_pool()
        if self._pool is None:
            return await get_pool()
        return self._pool

    async def list_reminders(self, owner_id: str) -> list[Reminder]:
        """List an owner's reminders ordered by scheduled_for."""
        pool = await self._get_pool()
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute(
                    f"""
                    SELECT {_COLUMNS} FROM reminders
                    WHERE user_id = ?
                    ORDER BY scheduled_for ASC
                    """,
                    (owner_id,),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError("list_reminders", str(e)) from e
        return [self._row_to_entity(row) for row in rows]

    async def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID."""
        pool = await self._get_pool()
        try:
            async with pool.acquire() as conn:
                cursor = await conn.execute(
                    f"SELECT {_COLUMNS} FROM reminders WHERE id = ?", (reminder_id,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistenceError("get", str(e)) from e
        if row is None:
            return None
        return self._row_to_entity(row)

    async def insert(self, reminder: Reminder) -> Reminder:
        """Create a new reminder."""
        pool = await self._get_pool()
        try:
            async with pool.transaction() as conn:
                await conn.execute(
                    f"""
                    INSERT INTO reminders ({_COLUMNS})
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (reminder.id, reminder.user_id, *self._entity_values(reminder),
                     _iso(reminder.created_at), _iso(reminder.updated_at)),
                )
        except aiosqlite.Error as e:
            raise PersistenceError("insert", str(e)) from e
        logger.info("reminder_inserted", reminder_id=reminder.id, user_id=reminder.user_id)
        return reminder

    async def save(self, reminder: Reminder) -> None:
        """Update an existing reminder."""
        pool = await self._get_pool()
        try:
            async with pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE reminders SET
                        title = ?, message = ?, category = ?, frequency = ?,
                        scheduled_for = ?, time_of_day = ?, days_of_week = ?,
                        day_of_month = ?, is_active = ?, is_snoozed = ?,
                        snooze_until = ?, completed_at = ?, last_notified_at = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (*self._entity_values(reminder), _iso(reminder.updated_at), reminder.id),
                )
                updated = cursor.rowcount
        except aiosqlite.Error as e:
            raise PersistenceError("save", str(e)) from e
        if updated == 0:
            raise ReminderNotFoundError(reminder.id)
        logger.debug("reminder_saved", reminder_id=reminder.id)

    async def remove(self, reminder_id: str) -> bool:
        """Delete a reminder by ID."""
        return await self.remove_many([reminder_id]) > 0

    async def remove_many(self, reminder_ids: Iterable[str]) -> int:
        """Delete several reminders in one transaction."""
        ids = list(dict.fromkeys(reminder_ids))
        if not ids:
            return 0
        placeholders = ", ".join("?" for _ in ids)
        pool = await self._get_pool()
        try:
            async with pool.transaction() as conn:
                cursor = await conn.execute(
                    f"DELETE FROM reminders WHERE id IN ({placeholders})", ids
                )
                deleted = cursor.rowcount
        except aiosqlite.Error as e:
            raise PersistenceError("remove_many", str(e)) from e
        if deleted:
            logger.info("reminders_deleted", count=deleted)
        return deleted

    @staticmethod
    def _entity_values(reminder: Reminder) -> tuple:
        """Column values from title through last_notified_at."""
        state = reminder.state
        return (
            reminder.title,
            reminder.message,
            reminder.category.value,
            reminder.frequency.value,
            _iso(reminder.scheduled_for),
            reminder.time_of_day.isoformat() if reminder.time_of_day else None,
            json.dumps(reminder.days_of_week) if reminder.days_of_week is not None else None,
            reminder.day_of_month,
            1 if reminder.is_active else 0,
            1 if isinstance(state, SnoozedState) else 0,
            _iso(reminder.snooze_until),
            _iso(reminder.completed_at),
            _iso(reminder.last_notified_at),
        )

    @staticmethod
    def _row_to_state(row: aiosqlite.Row) -> ReminderState:
        if row["completed_at"]:
            return CompletedState(at=datetime.fromisoformat(row["completed_at"]))
        if row["is_snoozed"] and row["snooze_until"]:
            return SnoozedState(until=datetime.fromisoformat(row["snooze_until"]))
        if row["is_active"]:
            return ActiveState()
        return InactiveState()

    @classmethod
    def _row_to_entity(cls, row: aiosqlite.Row) -> Reminder:
        """Convert a database row to a Reminder entity."""
        return Reminder(
            id=row["id"],
            user_id=row["user_id"],
            title=row["title"],
            message=row["message"] or "",
            category=ReminderCategory(row["category"]),
            frequency=ReminderFrequency(row["frequency"]),
            scheduled_for=datetime.fromisoformat(row["scheduled_for"]),
            time_of_day=time.fromisoformat(row["time_of_day"]) if row["time_of_day"] else None,
            days_of_week=json.loads(row["days_of_week"]) if row["days_of_week"] else None,
            day_of_month=row["day_of_month"],
            state=cls._row_to_state(row),
            last_notified_at=_parse(row["last_notified_at"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
