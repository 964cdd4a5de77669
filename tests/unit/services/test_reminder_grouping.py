"""Tests for the grouping engine."""

from datetime import date, datetime, timedelta

import pytest

from qc_reminders.core.entities.reminder import CompletedState, Reminder, SnoozedState
from qc_reminders.core.services.reminder_grouping import group_reminders

# Wednesday 20:00
NOW = datetime(2026, 10, 14, 20, 0)


def _make_reminder(title: str, scheduled_for: datetime, **overrides) -> Reminder:
    return Reminder(user_id="user-1", title=title, scheduled_for=scheduled_for, **overrides)


def _summary(groups) -> list[tuple[str, list[str]]]:
    return [(g.title, [r.title for r in g.reminders]) for g in groups]


class TestGroupReminders:
    """Tests for bucket assignment and ordering."""

    def test_overdue_and_today_never_merge(self):
        reminders = [
            _make_reminder("later-today", NOW + timedelta(hours=2)),
            _make_reminder("late", NOW - timedelta(hours=1)),
        ]
        groups = group_reminders(reminders, NOW)
        assert _summary(groups) == [
            ("Overdue", ["late"]),
            ("Today", ["later-today"]),
        ]

    def test_full_ordering(self):
        reminders = [
            _make_reminder("next-month", datetime(2026, 11, 20, 9, 0)),
            _make_reminder("friday", datetime(2026, 10, 16, 9, 0)),
            _make_reminder("tomorrow-late", datetime(2026, 10, 15, 21, 0)),
            _make_reminder("tomorrow-early", datetime(2026, 10, 15, 7, 0)),
            _make_reminder("tuesday", datetime(2026, 10, 20, 9, 0)),
            _make_reminder("next-wednesday", datetime(2026, 10, 21, 9, 0)),
            _make_reminder("yesterday", datetime(2026, 10, 13, 9, 0)),
        ]
        groups = group_reminders(reminders, NOW)
        assert _summary(groups) == [
            ("Overdue", ["yesterday"]),
            ("Tomorrow", ["tomorrow-early", "tomorrow-late"]),
            ("Friday", ["friday"]),
            ("Tuesday", ["tuesday"]),
            ("Later", ["next-wednesday", "next-month"]),
        ]

    def test_day_groups_carry_their_date(self):
        groups = group_reminders(
            [_make_reminder("friday", datetime(2026, 10, 16, 9, 0))], NOW
        )
        assert groups[0].day == date(2026, 10, 16)

    def test_midnight_boundary_uses_calendar_date(self):
        now = datetime(2026, 10, 14, 23, 30)
        groups = group_reminders(
            [_make_reminder("after-midnight", datetime(2026, 10, 15, 0, 15))], now
        )
        assert _summary(groups) == [("Tomorrow", ["after-midnight"])]

    def test_exactly_now_is_overdue(self):
        groups = group_reminders([_make_reminder("due-now", NOW)], NOW)
        assert _summary(groups) == [("Overdue", ["due-now"])]

    def test_snoozed_reminder_grouped_by_snooze_time(self):
        reminder = _make_reminder(
            "snoozed",
            NOW - timedelta(hours=1),
            state=SnoozedState(until=NOW + timedelta(minutes=30)),
        )
        assert _summary(group_reminders([reminder], NOW)) == [("Today", ["snoozed"])]

    def test_completed_reminders_in_trailing_group(self):
        reminders = [
            _make_reminder("done", NOW - timedelta(hours=3), state=CompletedState(at=NOW)),
            _make_reminder("open", NOW + timedelta(hours=1)),
        ]
        assert _summary(group_reminders(reminders, NOW)) == [
            ("Today", ["open"]),
            ("Completed", ["done"]),
        ]

    def test_narrow_weekday_window(self):
        groups = group_reminders(
            [_make_reminder("friday", datetime(2026, 10, 16, 9, 0))],
            NOW,
            weekday_label_days=2,
        )
        assert _summary(groups) == [("Later", ["friday"])]

    def test_empty_input(self):
        assert group_reminders([], NOW) == []

    @pytest.mark.parametrize("spread_hours", [1, 5, 13, 29])
    def test_partition_is_complete_and_non_empty(self, spread_hours):
        reminders = [
            _make_reminder(f"r{i}", NOW + timedelta(hours=(i - 10) * spread_hours))
            for i in range(30)
        ]
        groups = group_reminders(reminders, NOW)

        assert all(g.reminders for g in groups)
        flattened = [r.id for g in groups for r in g.reminders]
        assert len(flattened) == len(set(flattened))
        assert set(flattened) == {r.id for r in reminders}
        for group in groups:
            times = [r.scheduled_for for r in group.reminders]
            assert times == sorted(times)
        assert len({g.title for g in groups}) == len(groups)
