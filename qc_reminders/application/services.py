"""
Service factory functions for dependency injection.

Wires infrastructure implementations to the lifecycle controller.
Callers that already hold a store pass it in; otherwise the SQLite
store is used.
"""

from collections.abc import Callable
from datetime import datetime

from qc_reminders.application.reminder_controller import ReminderLifecycleController
from qc_reminders.core.interfaces.storage import IReminderStore


async def get_reminder_controller(
    user_id: str,
    reminder_store: IReminderStore | None = None,
    clock: Callable[[], datetime] = datetime.now,
    load: bool = True,
) -> ReminderLifecycleController:
    """
    Create a lifecycle controller for one user.

    Args:
        user_id: Owner of the reminder collection.
        reminder_store: Optional store override.
        clock: Source of "now".
        load: Load the owner's reminders before returning.

    Returns:
        Configured ReminderLifecycleController
    """
    if reminder_store is None:
        # Lazy import infrastructure to avoid circular imports
        from qc_reminders.infrastructure.storage.sqlite import get_reminder_store

        reminder_store = await get_reminder_store()

    controller = ReminderLifecycleController(reminder_store, user_id, clock=clock)
    if load:
        await controller.load_reminders()
    return controller
