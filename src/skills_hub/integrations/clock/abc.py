"""Clock abstraction for testing.

This module provides an ABC for reading the current time so that record
timestamps and generated ids are deterministic under test.
"""

from abc import ABC, abstractmethod


class Clock(ABC):
    """Abstract clock for dependency injection."""

    @abstractmethod
    def now_millis(self) -> int:
        """Return the current time as milliseconds since the Unix epoch."""
        ...
