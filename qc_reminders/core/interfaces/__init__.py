"""Core interfaces (abstract contracts)."""

from qc_reminders.core.interfaces.notifications import INotificationDispatcher
from qc_reminders.core.interfaces.storage import IReminderStore

__all__ = [
    "INotificationDispatcher",
    "IReminderStore",
]
