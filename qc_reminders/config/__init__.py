"""Configuration module."""

from qc_reminders.config.logging import (
    bind_owner,
    clear_owner,
    configure_logging,
    get_logger,
)
from qc_reminders.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "bind_owner",
    "clear_owner",
    "configure_logging",
    "get_logger",
]
