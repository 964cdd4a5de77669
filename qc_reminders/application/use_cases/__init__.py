"""Application use cases."""

from qc_reminders.application.use_cases.process_due_reminders import (
    DueProcessingResult,
    ProcessDueRemindersUseCase,
)

__all__ = [
    "DueProcessingResult",
    "ProcessDueRemindersUseCase",
]
