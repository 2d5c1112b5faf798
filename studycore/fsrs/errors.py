"""
Exceptions raised by the FSRS engine and its persistence adapter.
"""

from __future__ import annotations


class FsrsError(Exception):
    """Base class for scheduler errors."""


class ConfigurationError(FsrsError, ValueError):
    """Scheduler configuration is unusable (e.g. wrong weight count)."""


class PersistenceError(FsrsError, RuntimeError):
    """Database is not configured or its schema is incompatible."""
