"""
Recurrence calculator.

Turns a reminder's recurrence rule into its next concrete occurrence.
All arithmetic is calendar arithmetic on local wall-clock datetimes:
days are added to dates and months are stepped by (year, month), never
by fixed durations.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta

from pydantic import BaseModel, ConfigDict

from qc_reminders.core.entities.reminder import Reminder, ReminderFrequency
from qc_reminders.core.exceptions import ValidationError

WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


class RecurrenceRule(BaseModel):
    """
    Declarative recurrence rule.

    `at` is the explicit instant for once/custom reminders; recurring
    frequencies ignore it.
    """

    model_config = ConfigDict(frozen=True)

    frequency: ReminderFrequency
    time_of_day: time = time(9, 0)
    days_of_week: tuple[int, ...] = ()
    day_of_month: int | None = None
    at: datetime | None = None

    @classmethod
    def from_reminder(cls, reminder: Reminder) -> RecurrenceRule:
        """
        Build the rule for a reminder.

        Missing rule fields are anchored on `scheduled_for`: its time of
        day, its weekday for weekly rules and its day for monthly rules.
        An explicitly empty weekday list is kept empty and rejected by
        next_occurrence().
        """
        anchor = reminder.scheduled_for
        days = reminder.days_of_week
        if days is None:
            days = [sunday_index(anchor.date())]
        return cls(
            frequency=reminder.frequency,
            time_of_day=reminder.time_of_day or anchor.time().replace(second=0, microsecond=0),
            days_of_week=tuple(days),
            day_of_month=reminder.day_of_month or anchor.day,
            at=anchor,
        )


def sunday_index(d: date) -> int:
    """Weekday index with 0=Sunday .. 6=Saturday."""
    return (d.weekday() + 1) % 7


def add_months(d: date, months: int, day: int | None = None) -> date:
    """
    Step `d` by whole calendar months.

    The target day (default: d.day) is clamped to the last day of the
    resulting month, so Jan 31 + 1 month is Feb 28 (or 29).
    """
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day or d.day, last_day))


def _passed(candidate: datetime, reference: datetime, strict: bool) -> bool:
    # An occurrence exactly at `reference` is still due, unless strict
    if strict:
        return candidate <= reference
    return candidate < reference


def _next_weekly(
    days: tuple[int, ...], tod: time, reference: datetime, strict: bool
) -> datetime:
    if not days:
        raise ValidationError(
            "days_of_week", "Select at least one day of the week for weekly reminders"
        )
    for day in days:
        if not 0 <= day <= 6:
            raise ValidationError("days_of_week", "Weekday indices must be 0-6", day)

    today = reference.date()
    today_passed = _passed(datetime.combine(today, tod), reference, strict)
    current = sunday_index(today)

    offsets = []
    for day in set(days):
        offset = (day - current) % 7
        if offset == 0 and today_passed:
            offset = 7
        offsets.append(offset)

    return datetime.combine(today + timedelta(days=min(offsets)), tod)


def _next_monthly(
    day_of_month: int | None, tod: time, reference: datetime, strict: bool
) -> datetime:
    if day_of_month is None:
        raise ValidationError("day_of_month", "Specify a day of the month for monthly reminders")
    if not 1 <= day_of_month <= 31:
        raise ValidationError("day_of_month", "Day of month must be between 1 and 31", day_of_month)

    candidate = datetime.combine(add_months(reference.date(), 0, day_of_month), tod)
    if _passed(candidate, reference, strict):
        candidate = datetime.combine(add_months(reference.date(), 1, day_of_month), tod)
    return candidate


def next_occurrence(
    rule: RecurrenceRule, reference: datetime, *, strict: bool = False
) -> datetime:
    """
    Compute the next occurrence of `rule` relative to `reference`.

    Once and custom rules are passed through: their explicit instant is
    authoritative. Recurring rules return the earliest matching instant
    that is not before `reference` (not at or before it when `strict`).

    Raises:
        ValidationError: If the rule is missing the fields its frequency needs.
    """
    frequency = rule.frequency
    tod = rule.time_of_day

    if frequency in (ReminderFrequency.ONCE, ReminderFrequency.CUSTOM):
        if rule.at is None:
            raise ValidationError(
                "scheduled_for", f"{frequency.value} reminders need an explicit time"
            )
        return rule.at

    today = datetime.combine(reference.date(), tod)

    if frequency == ReminderFrequency.DAILY:
        if _passed(today, reference, strict):
            return datetime.combine(reference.date() + timedelta(days=1), tod)
        return today

    if frequency == ReminderFrequency.WEEKLY:
        return _next_weekly(rule.days_of_week, tod, reference, strict)

    if frequency == ReminderFrequency.BIWEEKLY:
        if _passed(today, reference, strict):
            return datetime.combine(reference.date() + timedelta(weeks=2), tod)
        return today

    if frequency == ReminderFrequency.MONTHLY:
        return _next_monthly(rule.day_of_month, tod, reference, strict)

    raise ValidationError("frequency", "Unsupported frequency", frequency)


def describe_rule(rule: RecurrenceRule) -> str:
    """Short human label, e.g. 'Weekly on Sun, Wed at 19:00'."""
    at = rule.time_of_day.strftime("%H:%M")
    frequency = rule.frequency

    if frequency == ReminderFrequency.ONCE:
        if rule.at is None:
            return "Once"
        return f"Once on {rule.at.strftime('%b')} {rule.at.day}, {rule.at.year} at {rule.at.strftime('%H:%M')}"
    if frequency == ReminderFrequency.DAILY:
        return f"Daily at {at}"
    if frequency == ReminderFrequency.WEEKLY:
        names = ", ".join(WEEKDAY_NAMES[d][:3] for d in sorted(set(rule.days_of_week)))
        return f"Weekly on {names} at {at}"
    if frequency == ReminderFrequency.BIWEEKLY:
        return f"Every 2 weeks at {at}"
    if frequency == ReminderFrequency.MONTHLY:
        return f"Monthly on day {rule.day_of_month} at {at}"
    return "Custom schedule"
