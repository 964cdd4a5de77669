"""Core domain entities."""

from qc_reminders.core.entities.reminder import (
    ActiveState,
    CompletedState,
    InactiveState,
    Reminder,
    ReminderCategory,
    ReminderFilter,
    ReminderFrequency,
    ReminderGroup,
    ReminderState,
    SnoozedState,
)

__all__ = [
    "ActiveState",
    "CompletedState",
    "InactiveState",
    "Reminder",
    "ReminderCategory",
    "ReminderFilter",
    "ReminderFrequency",
    "ReminderGroup",
    "ReminderState",
    "SnoozedState",
]
