"""Storage adapters for the reminder store interface."""

from qc_reminders.infrastructure.storage.memory import InMemoryReminderStore

__all__ = ["InMemoryReminderStore"]
