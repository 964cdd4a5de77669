"""QC reminders: recurrence scheduling and lifecycle for couples' check-in reminders."""

__version__ = "1.0.0"
