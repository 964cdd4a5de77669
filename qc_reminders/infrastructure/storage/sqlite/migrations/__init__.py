"""Versioned SQLite schema migrations."""

from qc_reminders.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    apply_pending_migrations,
    discover_migrations,
    initialize_database,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "apply_pending_migrations",
    "discover_migrations",
    "initialize_database",
]
