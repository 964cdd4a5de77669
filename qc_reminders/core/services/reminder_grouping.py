"""
Grouping engine.

Buckets a filtered reminder list into day groups for presentation:
Overdue, Today, Tomorrow, weekday names for the rest of the coming
week, then Later. Day boundaries are calendar dates compared against
the date of `now`, not rolling 24-hour windows.
"""

from collections.abc import Iterable
from datetime import date, datetime

from qc_reminders.core.entities.reminder import Reminder, ReminderGroup
from qc_reminders.core.services.recurrence import WEEKDAY_NAMES, sunday_index

OVERDUE = "Overdue"
TODAY = "Today"
TOMORROW = "Tomorrow"
LATER = "Later"
COMPLETED = "Completed"

# Group ordering: Overdue, then dated buckets by date, then Later, then Completed
_RANK_OVERDUE = 0
_RANK_DAY = 1
_RANK_LATER = 2
_RANK_COMPLETED = 3


def _bucket_for(
    reminder: Reminder, now: datetime, weekday_label_days: int
) -> tuple[int, date | None, str]:
    if reminder.is_completed:
        return _RANK_COMPLETED, None, COMPLETED

    t = reminder.effective_time(now)
    if t <= now:
        return _RANK_OVERDUE, None, OVERDUE

    days_ahead = (t.date() - now.date()).days
    if days_ahead == 0:
        return _RANK_DAY, t.date(), TODAY
    if days_ahead == 1:
        return _RANK_DAY, t.date(), TOMORROW
    if days_ahead < weekday_label_days:
        return _RANK_DAY, t.date(), WEEKDAY_NAMES[sunday_index(t.date())]
    return _RANK_LATER, None, LATER


def group_reminders(
    reminders: Iterable[Reminder],
    now: datetime,
    weekday_label_days: int = 7,
) -> list[ReminderGroup]:
    """
    Group reminders into ordered, non-empty buckets.

    Args:
        reminders: Already filtered reminders.
        now: Reference instant.
        weekday_label_days: Days ahead (exclusive) labeled by weekday name;
            reminders further out fall into "Later".

    Returns:
        Groups in display order, each sorted by effective time ascending.
    """
    buckets: dict[tuple[int, date | None, str], list[Reminder]] = {}
    for reminder in reminders:
        key = _bucket_for(reminder, now, weekday_label_days)
        buckets.setdefault(key, []).append(reminder)

    groups = []
    for rank, day, title in sorted(buckets, key=lambda k: (k[0], k[1] or date.min)):
        items = sorted(buckets[(rank, day, title)], key=lambda r: r.effective_time(now))
        groups.append(ReminderGroup(title=title, day=day, reminders=items))
    return groups
