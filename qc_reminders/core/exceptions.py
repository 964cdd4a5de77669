"""
Domain exceptions for the reminder system.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class QCError(Exception):
    """Base exception for all reminder-system errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Validation Exceptions
class ValidationError(QCError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Storage Exceptions
class StorageError(QCError):
    """Base exception for storage operations."""

    pass


class PersistenceError(StorageError):
    """Reminder store could not complete a read or write."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Persistence error during {operation}: {error}",
            code="PERSISTENCE_ERROR",
            details={"operation": operation, "error": error},
        )


class NotFoundError(StorageError):
    """Entity not found in storage."""

    pass


class ReminderNotFoundError(NotFoundError):
    """Reminder not found in storage."""

    def __init__(self, reminder_id: str):
        super().__init__(
            f"Reminder not found: {reminder_id}",
            code="REMINDER_NOT_FOUND",
            details={"reminder_id": reminder_id},
        )


class ConfigurationError(QCError):
    """Configuration error."""

    pass
