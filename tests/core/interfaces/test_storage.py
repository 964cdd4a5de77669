"""Unit tests for storage and notification interface abstract classes."""

import pytest

from qc_reminders.core.interfaces import INotificationDispatcher, IReminderStore
from qc_reminders.infrastructure.storage import InMemoryReminderStore
from qc_reminders.infrastructure.storage.sqlite import SQLiteReminderStore


class TestIReminderStoreInterface:
    """Tests for IReminderStore abstract interface."""

    def test_is_abstract_class(self):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            IReminderStore()

    def test_operations_defined(self):
        expected = {"list_reminders", "get", "insert", "save", "remove", "remove_many"}
        assert set(IReminderStore.__abstractmethods__) == expected

    @pytest.mark.parametrize("impl", [InMemoryReminderStore, SQLiteReminderStore])
    def test_implementations_are_concrete(self, impl):
        assert issubclass(impl, IReminderStore)
        assert not impl.__abstractmethods__


class TestINotificationDispatcherInterface:
    def test_is_abstract_class(self):
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            INotificationDispatcher()

    def test_dispatch_defined(self):
        assert set(INotificationDispatcher.__abstractmethods__) == {"dispatch"}
