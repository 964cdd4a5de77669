"""
In-memory reminder storage.

Dict-backed store for embedding and tests. Entities are deep-copied on the
way in and out so callers never share mutable state with the store.
"""

from collections.abc import Iterable

from qc_reminders.config import get_logger
from qc_reminders.core.entities.reminder import Reminder
from qc_reminders.core.exceptions import ReminderNotFoundError
from qc_reminders.core.interfaces.storage import IReminderStore

logger = get_logger(__name__)


class InMemoryReminderStore(IReminderStore):
    """Reminder store kept in a process-local dict."""

    def __init__(self, reminders: Iterable[Reminder] = ()):
        self._items: dict[str, Reminder] = {r.id: r.model_copy(deep=True) for r in reminders}

    async def list_reminders(self, owner_id: str) -> list[Reminder]:
        owned = [r for r in self._items.values() if r.user_id == owner_id]
        owned.sort(key=lambda r: r.scheduled_for)
        return [r.model_copy(deep=True) for r in owned]

    async def get(self, reminder_id: str) -> Reminder | None:
        reminder = self._items.get(reminder_id)
        return reminder.model_copy(deep=True) if reminder else None

    async def insert(self, reminder: Reminder) -> Reminder:
        self._items[reminder.id] = reminder.model_copy(deep=True)
        return reminder

    async def save(self, reminder: Reminder) -> None:
        if reminder.id not in self._items:
            raise ReminderNotFoundError(reminder.id)
        self._items[reminder.id] = reminder.model_copy(deep=True)

    async def remove(self, reminder_id: str) -> bool:
        return self._items.pop(reminder_id, None) is not None

    async def remove_many(self, reminder_ids: Iterable[str]) -> int:
        removed = 0
        for reminder_id in set(reminder_ids):
            if self._items.pop(reminder_id, None) is not None:
                removed += 1
        logger.debug("reminders_removed", count=removed)
        return removed
