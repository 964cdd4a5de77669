"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from qc_reminders.infrastructure.storage.sqlite import ConnectionPool, SQLiteReminderStore
from qc_reminders.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> Path:
    """Create and migrate a temporary database."""
    results = await initialize_database(temp_db_path)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pool(initialized_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over the migrated database."""
    pool = ConnectionPool(initialized_db, pool_size=1)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def reminder_store(pool: ConnectionPool) -> SQLiteReminderStore:
    return SQLiteReminderStore(pool)
