"""
Reminder lifecycle controller.

Owns one user's in-memory reminder collection and every mutation on it.
Mutations are write-through: the change is applied to a copy, the copy is
persisted, and only after the store confirms is it swapped into the
collection. A failed write therefore leaves the collection exactly as it
was before the call.
"""

from collections.abc import Awaitable, Callable, Iterable
from datetime import datetime, time, timedelta
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from qc_reminders.config import get_logger, get_settings
from qc_reminders.config.settings import ReminderSettings
from qc_reminders.core.entities.reminder import (
    ActiveState,
    CompletedState,
    InactiveState,
    Reminder,
    ReminderCategory,
    ReminderFilter,
    ReminderFrequency,
    ReminderGroup,
    SnoozedState,
)
from qc_reminders.core.exceptions import (
    NotFoundError,
    PersistenceError,
    ReminderNotFoundError,
    ValidationError,
)
from qc_reminders.core.interfaces.storage import IReminderStore
from qc_reminders.core.services.recurrence import RecurrenceRule, next_occurrence
from qc_reminders.core.services.reminder_filter import (
    ReminderCounts,
    filter_reminders,
    matches_filter,
    summarize,
)
from qc_reminders.core.services.reminder_grouping import group_reminders
from qc_reminders.core.services.reminder_validator import (
    clean_text,
    validate_reminder_text,
    validate_rule_fields,
    validate_snooze_minutes,
)

logger = get_logger(__name__)

T = TypeVar("T")

EDITABLE_FIELDS = frozenset({
    "title",
    "message",
    "category",
    "frequency",
    "scheduled_for",
    "time_of_day",
    "days_of_week",
    "day_of_month",
})
RULE_FIELDS = frozenset({"frequency", "time_of_day", "days_of_week", "day_of_month"})


def _pin_rule(reminder: Reminder, now: datetime) -> Reminder:
    """
    Store the anchored rule fields on a recurring reminder and derive
    its next occurrence from them.

    Pinning keeps the rule stable when scheduled_for later moves, e.g.
    a monthly day 31 clamped to Apr 30 stays "day 31" for May.
    """
    rule = RecurrenceRule.from_reminder(reminder)
    changes: dict[str, Any] = {"time_of_day": rule.time_of_day}
    if reminder.frequency == ReminderFrequency.WEEKLY:
        changes["days_of_week"] = list(rule.days_of_week)
    elif reminder.frequency == ReminderFrequency.MONTHLY:
        changes["day_of_month"] = rule.day_of_month
    changes["scheduled_for"] = next_occurrence(rule, now)
    return reminder.model_copy(update=changes)


def _rebuild(reminder: Reminder, changes: dict[str, Any]) -> Reminder:
    """Apply changes with full model validation."""
    try:
        return Reminder.model_validate({**reminder.model_dump(), **changes})
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "reminder"
        raise ValidationError(field, error["msg"], error.get("input")) from e


class ReminderLifecycleController:
    """
    Lifecycle controller for one user's reminders.

    Read operations (filtered_reminders, grouped_reminders, counts) are
    pure functions over the loaded snapshot. Mutations await the store
    before touching the snapshot.
    """

    def __init__(
        self,
        store: IReminderStore,
        user_id: str,
        clock: Callable[[], datetime] = datetime.now,
        settings: ReminderSettings | None = None,
    ) -> None:
        self._store = store
        self.user_id = user_id
        self._clock = clock
        self._settings = settings or get_settings().reminders

        self.reminders: list[Reminder] = []
        self.selected_filter = ReminderFilter.ALL
        self.is_loading = False

    def now(self) -> datetime:
        return self._clock()

    # Store access

    async def _persist(self, operation: str, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        try:
            return await func(*args)
        except NotFoundError:
            raise
        except PersistenceError as e:
            logger.error("reminder_store_failed", operation=operation, error=e.message)
            raise
        except Exception as e:
            logger.error("reminder_store_failed", operation=operation, error=str(e))
            raise PersistenceError(operation, str(e)) from e

    def _current(self, reminder: Reminder | str) -> Reminder:
        reminder_id = reminder if isinstance(reminder, str) else reminder.id
        for item in self.reminders:
            if item.id == reminder_id:
                return item
        raise ReminderNotFoundError(reminder_id)

    def _sort(self) -> None:
        self.reminders.sort(key=lambda r: r.scheduled_for)

    async def _commit(self, updated: Reminder, event: str) -> Reminder:
        updated.updated_at = self.now()
        await self._persist("save", self._store.save, updated)

        self.reminders = [updated if r.id == updated.id else r for r in self.reminders]
        self._sort()
        logger.info(event, reminder_id=updated.id, user_id=self.user_id)
        return updated

    # Loading

    async def load_reminders(self) -> list[Reminder]:
        """Load the owner's reminders, replacing the snapshot."""
        self.is_loading = True
        try:
            loaded = await self._persist("list_reminders", self._store.list_reminders, self.user_id)
        finally:
            self.is_loading = False

        self.reminders = [r for r in loaded if r.user_id == self.user_id]
        self._sort()
        logger.debug("reminders_loaded", user_id=self.user_id, count=len(self.reminders))
        return self.reminders

    async def refresh(self) -> list[Reminder]:
        return await self.load_reminders()

    # Mutations

    async def create(
        self,
        title: str,
        message: str,
        category: ReminderCategory = ReminderCategory.CUSTOM,
        frequency: ReminderFrequency = ReminderFrequency.ONCE,
        scheduled_for: datetime | None = None,
        *,
        time_of_day: time | None = None,
        days_of_week: list[int] | None = None,
        day_of_month: int | None = None,
    ) -> Reminder:
        """
        Create and persist a reminder.

        When scheduled_for is omitted, recurring reminders get their first
        occurrence from the rule; once/custom reminders require it.

        Raises:
            ValidationError: Invalid text or rule fields.
            PersistenceError: The store rejected the insert.
        """
        try:
            frequency = ReminderFrequency(frequency)
        except ValueError as e:
            raise ValidationError("frequency", "Unknown frequency", frequency) from e
        title, message = validate_reminder_text(title, message, self._settings)
        validate_rule_fields(frequency, days_of_week, day_of_month)
        now = self.now()

        if scheduled_for is None:
            if not frequency.is_recurring:
                raise ValidationError(
                    "scheduled_for", f"Please specify when this {frequency.value} reminder should occur"
                )
            if time_of_day is None:
                raise ValidationError(
                    "time_of_day", "Please specify what time of day for recurring reminders"
                )

        reminder = _rebuild(
            Reminder(user_id=self.user_id, title=title, scheduled_for=now),
            {
                "message": message,
                "category": category,
                "frequency": frequency,
                "scheduled_for": scheduled_for or now,
                "time_of_day": time_of_day,
                "days_of_week": days_of_week,
                "day_of_month": day_of_month,
                "created_at": now,
                "updated_at": now,
            },
        )
        if scheduled_for is None:
            reminder = _pin_rule(reminder, now)

        created = await self._persist("insert", self._store.insert, reminder)

        self.reminders.append(created)
        self._sort()
        logger.info(
            "reminder_created",
            reminder_id=created.id,
            user_id=self.user_id,
            frequency=created.frequency.value,
            scheduled_for=created.scheduled_for,
        )
        return created

    async def update(self, reminder: Reminder | str, **fields: Any) -> Reminder:
        """
        Apply a partial edit.

        Changing any rule field on a recurring reminder recomputes
        scheduled_for from the rule, unless scheduled_for is part of the edit.
        """
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError("fields", "Unknown or read-only fields", sorted(unknown))

        current = self._current(reminder)
        changes = dict(fields)
        if "title" in changes:
            changes["title"] = clean_text("title", changes["title"], self._settings.max_title_length)
        if "message" in changes:
            changes["message"] = clean_text(
                "message", changes["message"], self._settings.max_message_length
            )

        updated = _rebuild(current, changes)
        validate_rule_fields(updated.frequency, updated.days_of_week, updated.day_of_month)

        rule_changed = any(getattr(updated, f) != getattr(current, f) for f in RULE_FIELDS)
        if rule_changed and updated.frequency.is_recurring and "scheduled_for" not in fields:
            updated = _pin_rule(updated, self.now())

        return await self._commit(updated, "reminder_updated")

    async def complete(self, reminder: Reminder | str) -> Reminder:
        """Mark done. Completing an already completed reminder is a no-op."""
        current = self._current(reminder)
        if current.is_completed:
            logger.debug("reminder_already_completed", reminder_id=current.id)
            return current

        updated = current.model_copy(update={"state": CompletedState(at=self.now())})
        return await self._commit(updated, "reminder_completed")

    async def snooze(self, reminder: Reminder | str, minutes: int | None = None) -> Reminder:
        """
        Push the reminder's effective time to now + minutes.

        Raises:
            ValidationError: Non-positive minutes, or the reminder is not active.
        """
        if minutes is None:
            minutes = self._settings.default_snooze_minutes
        validate_snooze_minutes(minutes)

        current = self._current(reminder)
        if not current.is_active:
            raise ValidationError("state", "Only active reminders can be snoozed", current.state.kind)

        until = self.now() + timedelta(minutes=minutes)
        updated = current.model_copy(update={"state": SnoozedState(until=until)})
        return await self._commit(updated, "reminder_snoozed")

    async def toggle(self, reminder: Reminder | str) -> Reminder:
        """
        Flip between enabled and disabled.

        Completed reminders are left untouched; disabling a snoozed
        reminder drops the snooze.
        """
        current = self._current(reminder)
        if current.is_completed:
            logger.debug("reminder_toggle_ignored", reminder_id=current.id)
            return current

        state = InactiveState() if current.is_active else ActiveState()
        updated = current.model_copy(update={"state": state})
        return await self._commit(updated, "reminder_toggled")

    async def delete(self, reminder: Reminder | str) -> None:
        """Delete a reminder. Unknown IDs are ignored."""
        reminder_id = reminder if isinstance(reminder, str) else reminder.id
        try:
            removed = await self._persist("remove", self._store.remove, reminder_id)
        except NotFoundError:
            removed = False

        self.reminders = [r for r in self.reminders if r.id != reminder_id]
        logger.info("reminder_deleted", reminder_id=reminder_id, existed=removed)

    async def delete_many(self, reminders: Iterable[Reminder | str]) -> None:
        """Delete several reminders in one store call."""
        ids = {r if isinstance(r, str) else r.id for r in reminders}
        if not ids:
            return
        try:
            removed = await self._persist("remove_many", self._store.remove_many, ids)
        except NotFoundError:
            removed = 0

        self.reminders = [r for r in self.reminders if r.id not in ids]
        logger.info("reminders_deleted", requested=len(ids), removed=removed)

    async def mark_notified(self, reminder: Reminder | str) -> Reminder:
        """
        Record that the current occurrence was handed to a delivery channel.

        Recurring reminders roll forward to their next occurrence strictly
        after now; an expired snooze is cleared.
        """
        current = self._current(reminder)
        now = self.now()
        changes: dict[str, Any] = {"last_notified_at": now}

        if current.is_snoozed and not current.is_snoozed_at(now):
            changes["state"] = ActiveState()
        if current.frequency.is_recurring:
            changes["scheduled_for"] = next_occurrence(
                RecurrenceRule.from_reminder(current), now, strict=True
            )

        return await self._commit(current.model_copy(update=changes), "reminder_notified")

    # Reads

    def set_filter(self, selector: ReminderFilter) -> list[Reminder]:
        self.selected_filter = ReminderFilter(selector)
        return self.filtered_reminders

    def filter(self, selector: ReminderFilter) -> list[Reminder]:
        return filter_reminders(self.reminders, selector, self.now())

    @property
    def filtered_reminders(self) -> list[Reminder]:
        return self.filter(self.selected_filter)

    def grouped_reminders(self) -> list[ReminderGroup]:
        now = self.now()
        return group_reminders(
            filter_reminders(self.reminders, self.selected_filter, now),
            now,
            weekday_label_days=self._settings.weekday_label_days,
        )

    @property
    def counts(self) -> ReminderCounts:
        return summarize(self.reminders, self.now())

    @property
    def upcoming_count(self) -> int:
        return self.counts.upcoming

    @property
    def overdue_count(self) -> int:
        return self.counts.overdue

    @property
    def completed_count(self) -> int:
        return self.counts.completed

    @property
    def active_count(self) -> int:
        return self.counts.active

    def due_reminders(self) -> list[Reminder]:
        """
        Overdue reminders whose current occurrence has not been notified.

        The occurrence is the expired snooze time when there is one,
        otherwise scheduled_for.
        """
        now = self.now()
        due = []
        for reminder in self.reminders:
            if not matches_filter(reminder, ReminderFilter.OVERDUE, now):
                continue
            trigger = reminder.snooze_until or reminder.scheduled_for
            if reminder.last_notified_at is None or reminder.last_notified_at < trigger:
                due.append(reminder)
        due.sort(key=lambda r: r.effective_time(now))
        return due
