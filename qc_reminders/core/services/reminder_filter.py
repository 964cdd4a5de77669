"""
Filter and classification engine.

Pure functions over an in-memory reminder snapshot. Counts are computed
with the same predicate as filter_reminders(), so a count always equals
the length of the corresponding filtered list.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from qc_reminders.core.entities.reminder import Reminder, ReminderFilter


@dataclass(frozen=True)
class ReminderCounts:
    """Per-view counts for a reminder collection."""

    active: int = 0
    upcoming: int = 0
    overdue: int = 0
    completed: int = 0


def matches_filter(reminder: Reminder, selector: ReminderFilter, now: datetime) -> bool:
    """Check whether a reminder belongs in the given view."""
    if selector == ReminderFilter.COMPLETED:
        return reminder.completed_at is not None

    if reminder.completed_at is not None or not reminder.is_active:
        return False
    if selector == ReminderFilter.ALL:
        return True

    t = reminder.effective_time(now)
    if selector == ReminderFilter.UPCOMING:
        return t > now
    return t <= now


def filter_reminders(
    reminders: Iterable[Reminder], selector: ReminderFilter, now: datetime
) -> list[Reminder]:
    """
    Return the reminders in a view, sorted for display.

    Completed reminders are ordered most recently completed first;
    every other view is ordered by effective time ascending.
    """
    selected = [r for r in reminders if matches_filter(r, selector, now)]
    if selector == ReminderFilter.COMPLETED:
        selected.sort(key=lambda r: r.completed_at, reverse=True)  # type: ignore[arg-type, return-value]
    else:
        selected.sort(key=lambda r: r.effective_time(now))
    return selected


def count_reminders(
    reminders: Iterable[Reminder], selector: ReminderFilter, now: datetime
) -> int:
    return sum(1 for r in reminders if matches_filter(r, selector, now))


def summarize(reminders: Iterable[Reminder], now: datetime) -> ReminderCounts:
    """Counts for every view in one pass."""
    items = list(reminders)
    return ReminderCounts(
        active=count_reminders(items, ReminderFilter.ALL, now),
        upcoming=count_reminders(items, ReminderFilter.UPCOMING, now),
        overdue=count_reminders(items, ReminderFilter.OVERDUE, now),
        completed=count_reminders(items, ReminderFilter.COMPLETED, now),
    )
