"""
Abstract interface for notification delivery.

Push, email and SMS channels live outside the reminder core; the core
only decides which reminders are due and hands them over.
"""

from abc import ABC, abstractmethod

from qc_reminders.core.entities.reminder import Reminder


class INotificationDispatcher(ABC):
    """Fire-and-forget delivery channel for due reminders."""

    @abstractmethod
    async def dispatch(self, reminder: Reminder) -> None:
        """Deliver a due reminder to its owner."""
        pass
