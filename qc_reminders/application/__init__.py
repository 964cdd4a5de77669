"""Application layer: lifecycle controller, use cases and DI wiring."""

from qc_reminders.application.reminder_controller import ReminderLifecycleController
from qc_reminders.application.services import get_reminder_controller
from qc_reminders.application.use_cases import (
    DueProcessingResult,
    ProcessDueRemindersUseCase,
)

__all__ = [
    "DueProcessingResult",
    "ProcessDueRemindersUseCase",
    "ReminderLifecycleController",
    "get_reminder_controller",
]
