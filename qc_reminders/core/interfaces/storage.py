"""
Abstract interfaces for storage providers.

Defines the contract the reminder core consumes from its collection store.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from qc_reminders.core.entities.reminder import Reminder


class IReminderStore(ABC):
    """
    Abstract interface for reminder storage.

    Reminders are always scoped to an owning user; the core never
    queries across owners. Implementations raise PersistenceError
    on I/O failure.
    """

    @abstractmethod
    async def list_reminders(self, owner_id: str) -> list[Reminder]:
        """List an owner's reminders ordered by scheduled_for ascending."""
        pass

    @abstractmethod
    async def get(self, reminder_id: str) -> Reminder | None:
        """Get reminder by ID."""
        pass

    @abstractmethod
    async def insert(self, reminder: Reminder) -> Reminder:
        """Persist a new reminder and return the stored entity."""
        pass

    @abstractmethod
    async def save(self, reminder: Reminder) -> None:
        """
        Overwrite an existing reminder.

        Raises:
            ReminderNotFoundError: If no reminder with this ID is stored.
        """
        pass

    @abstractmethod
    async def remove(self, reminder_id: str) -> bool:
        """Delete a reminder. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def remove_many(self, reminder_ids: Iterable[str]) -> int:
        """Delete several reminders atomically. Returns the number removed."""
        pass
