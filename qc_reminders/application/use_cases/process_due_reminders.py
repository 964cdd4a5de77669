"""
Process Due Reminders Use Case.

Polled by an external scheduler: finds an owner's due reminders, hands
each to the notification dispatcher, and records the notification so
recurring reminders roll forward to their next occurrence.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from qc_reminders.application.reminder_controller import ReminderLifecycleController
from qc_reminders.config import bind_owner, clear_owner, get_logger
from qc_reminders.core.exceptions import StorageError
from qc_reminders.core.interfaces.notifications import INotificationDispatcher
from qc_reminders.core.interfaces.storage import IReminderStore

logger = get_logger(__name__)


@dataclass
class DueProcessingResult:
    """Result of one due-reminder pass."""

    due: int = 0
    dispatched: int = 0
    rescheduled: int = 0
    failed: int = 0
    dispatched_ids: list[str] = field(default_factory=list)


class ProcessDueRemindersUseCase:
    """
    Use case that dispatches due reminders for one owner.

    A dispatch failure, or a store failure while recording the
    notification, is logged and counted; the reminder is left un-notified
    so the next pass retries it.
    """

    def __init__(
        self,
        dispatcher: INotificationDispatcher,
        reminder_store: IReminderStore | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._dispatcher = dispatcher
        self._rem_store = reminder_store
        self._clock = clock

    async def _get_rem_store(self) -> IReminderStore:
        if self._rem_store is None:
            from qc_reminders.infrastructure.storage.sqlite import get_reminder_store
            self._rem_store = await get_reminder_store()
        return self._rem_store

    async def execute(self, owner_id: str) -> DueProcessingResult:
        """
        Dispatch every due reminder of an owner.

        Args:
            owner_id: User whose reminders are processed.

        Returns:
            DueProcessingResult with counts and dispatched reminder IDs.
        """
        bind_owner(owner_id)
        try:
            return await self._process(owner_id)
        finally:
            clear_owner()

    async def _process(self, owner_id: str) -> DueProcessingResult:
        controller = ReminderLifecycleController(
            await self._get_rem_store(), owner_id, clock=self._clock
        )
        await controller.load_reminders()

        due = controller.due_reminders()
        result = DueProcessingResult(due=len(due))

        for reminder in due:
            try:
                await self._dispatcher.dispatch(reminder)
            except Exception as e:
                result.failed += 1
                logger.warning(
                    "reminder_dispatch_failed",
                    reminder_id=reminder.id,
                    error=str(e),
                )
                continue

            result.dispatched += 1
            result.dispatched_ids.append(reminder.id)

            try:
                notified = await controller.mark_notified(reminder)
            except StorageError as e:
                # Dispatched but not recorded; the next pass sends it again
                result.failed += 1
                logger.error(
                    "reminder_mark_notified_failed",
                    reminder_id=reminder.id,
                    error=e.message,
                )
                continue

            if notified.scheduled_for != reminder.scheduled_for:
                result.rescheduled += 1

        logger.info(
            "due_reminders_processed",
            due=result.due,
            dispatched=result.dispatched,
            rescheduled=result.rescheduled,
            failed=result.failed,
        )
        return result
