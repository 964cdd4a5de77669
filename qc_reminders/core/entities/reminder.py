"""
Reminder domain entities.

A reminder carries a recurrence rule (frequency plus its frequency-specific
fields) and a status. The status is one discriminated value, so a reminder
can never be both completed and active, or snoozed without a snooze time.
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReminderCategory(str, Enum):
    """What the reminder is about. Informational only."""

    CHECK_IN = "check_in"
    HABIT = "habit"
    ACTION_ITEM = "action_item"
    PARTNER_MOMENT = "partner_moment"
    SPECIAL_DATE = "special_date"
    CUSTOM = "custom"


class ReminderFrequency(str, Enum):
    """How often a reminder repeats."""

    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"

    @property
    def is_recurring(self) -> bool:
        """True when the next occurrence is derived from the rule."""
        return self in (
            ReminderFrequency.DAILY,
            ReminderFrequency.WEEKLY,
            ReminderFrequency.BIWEEKLY,
            ReminderFrequency.MONTHLY,
        )


class ReminderFilter(str, Enum):
    """List view selector."""

    ALL = "all"
    UPCOMING = "upcoming"
    OVERDUE = "overdue"
    COMPLETED = "completed"


class ActiveState(BaseModel):
    """Enabled and waiting for its scheduled time."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["active"] = "active"


class InactiveState(BaseModel):
    """Disabled by the user, kept for history."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["inactive"] = "inactive"


class SnoozedState(BaseModel):
    """Enabled, with the next occurrence pushed to `until`."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["snoozed"] = "snoozed"
    until: datetime


class CompletedState(BaseModel):
    """Marked done at `at`."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["completed"] = "completed"
    at: datetime


ReminderState = Annotated[
    ActiveState | InactiveState | SnoozedState | CompletedState,
    Field(discriminator="kind"),
]


class Reminder(BaseModel):
    """
    Reminder entity owned by a single user.

    `scheduled_for` is the next occurrence derived from the recurrence rule
    (or the explicit instant for once/custom reminders). Filtering and
    grouping read `effective_time()`, which honours a pending snooze.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    title: str
    message: str = ""
    category: ReminderCategory = ReminderCategory.CUSTOM
    frequency: ReminderFrequency = ReminderFrequency.ONCE
    scheduled_for: datetime

    # Recurrence rule fields
    time_of_day: time | None = None
    days_of_week: list[int] | None = None  # 0=Sunday .. 6=Saturday
    day_of_month: int | None = None

    state: ReminderState = Field(default_factory=ActiveState)
    last_notified_at: datetime | None = None

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("days_of_week")
    @classmethod
    def normalize_days(cls, v: list[int] | None) -> list[int] | None:
        if v is None:
            return None
        return sorted(set(v))

    @property
    def is_active(self) -> bool:
        return isinstance(self.state, (ActiveState, SnoozedState))

    @property
    def is_snoozed(self) -> bool:
        """
        True while the stored state is the snoozed variant.

        An expired snooze stays in this variant until mark_notified clears
        it; use is_snoozed_at(now) to ask whether the snooze is still pending.
        """
        return isinstance(self.state, SnoozedState)

    @property
    def is_completed(self) -> bool:
        return isinstance(self.state, CompletedState)

    @property
    def snooze_until(self) -> datetime | None:
        """Stored snooze time, also when it has already passed."""
        if isinstance(self.state, SnoozedState):
            return self.state.until
        return None

    @property
    def completed_at(self) -> datetime | None:
        if isinstance(self.state, CompletedState):
            return self.state.at
        return None

    def is_snoozed_at(self, now: datetime) -> bool:
        """True while a snooze is pending (its time has not yet passed)."""
        until = self.snooze_until
        return until is not None and until > now

    def effective_time(self, now: datetime) -> datetime:
        """Instant used for filtering and grouping."""
        if self.is_snoozed_at(now):
            return self.snooze_until  # type: ignore[return-value]
        return self.scheduled_for


class ReminderGroup(BaseModel):
    """Labeled bucket of reminders for list presentation."""

    title: str
    day: date | None = None
    reminders: list[Reminder] = Field(default_factory=list)
