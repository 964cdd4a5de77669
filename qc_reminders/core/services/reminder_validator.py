"""
Reminder input validation.

Raises ValidationError before any state is touched, so a rejected
mutation never partially applies.
"""

from collections.abc import Sequence

from qc_reminders.config import get_settings
from qc_reminders.config.settings import ReminderSettings
from qc_reminders.core.entities.reminder import ReminderFrequency
from qc_reminders.core.exceptions import ValidationError


def clean_text(field: str, value: str, max_length: int) -> str:
    """Strip a text field and enforce presence and length."""
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(field, f"Reminder {field} is required", value)
    if len(cleaned) > max_length:
        raise ValidationError(
            field, f"{field.capitalize()} cannot exceed {max_length} characters", value
        )
    return cleaned


def validate_rule_fields(
    frequency: ReminderFrequency,
    days_of_week: Sequence[int] | None,
    day_of_month: int | None,
) -> None:
    """Check the frequency-specific rule fields."""
    if days_of_week is not None:
        if frequency in (ReminderFrequency.WEEKLY, ReminderFrequency.BIWEEKLY) and not days_of_week:
            raise ValidationError(
                "days_of_week",
                f"Please select at least one day of the week for {frequency.value} reminders",
            )
        invalid = [d for d in days_of_week if not 0 <= d <= 6]
        if invalid:
            raise ValidationError("days_of_week", "Weekday indices must be 0-6", invalid)

    if day_of_month is not None and not 1 <= day_of_month <= 31:
        raise ValidationError(
            "day_of_month", "Day of month must be between 1 and 31", day_of_month
        )


def validate_snooze_minutes(minutes: int) -> None:
    if minutes <= 0:
        raise ValidationError("minutes", "Snooze duration must be positive", minutes)


def validate_reminder_text(
    title: str, message: str, settings: ReminderSettings | None = None
) -> tuple[str, str]:
    """Return the cleaned (title, message) pair."""
    settings = settings or get_settings().reminders
    return (
        clean_text("title", title, settings.max_title_length),
        clean_text("message", message, settings.max_message_length),
    )
