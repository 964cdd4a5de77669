"""Core domain services."""

from qc_reminders.core.services.recurrence import (
    WEEKDAY_NAMES,
    RecurrenceRule,
    add_months,
    describe_rule,
    next_occurrence,
    sunday_index,
)
from qc_reminders.core.services.reminder_filter import (
    ReminderCounts,
    count_reminders,
    filter_reminders,
    matches_filter,
    summarize,
)
from qc_reminders.core.services.reminder_grouping import group_reminders
from qc_reminders.core.services.reminder_validator import (
    validate_reminder_text,
    validate_rule_fields,
    validate_snooze_minutes,
)

__all__ = [
    "WEEKDAY_NAMES",
    "RecurrenceRule",
    "ReminderCounts",
    "add_months",
    "count_reminders",
    "describe_rule",
    "filter_reminders",
    "group_reminders",
    "matches_filter",
    "next_occurrence",
    "summarize",
    "sunday_index",
    "validate_reminder_text",
    "validate_rule_fields",
    "validate_snooze_minutes",
]
