"""Poll systemd for unit state and journal entries."""

from __future__ import annotations

from .config import Settings
from .errors import (
    CommandFailedError,
    CommandNotFoundError,
    CommandTimeoutError,
    EntryParseError,
    StateUnavailableError,
    SystemdError,
)
from .journalctl import Entry, Journalctl, Priority
from .systemctl import Systemctl, UnitStatus, unit_name

__all__ = [
    "CommandFailedError",
    "CommandNotFoundError",
    "CommandTimeoutError",
    "Entry",
    "EntryParseError",
    "Journalctl",
    "Priority",
    "Settings",
    "StateUnavailableError",
    "Systemctl",
    "SystemdError",
    "UnitStatus",
    "unit_name",
]
