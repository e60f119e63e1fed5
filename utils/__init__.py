"""
Utility modules for atmo_sensor.

This package provides shared utilities for the command-line entry points.
"""

from .process_lock import SessionBusyError, SessionLock, lock_name

__all__ = [
    "SessionBusyError",
    "SessionLock",
    "lock_name",
]
