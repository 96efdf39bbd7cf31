"""Fake Clock implementation for testing.

FakeClock returns a fixed time that optionally advances by a fixed step on
every read, and records how many times it was read.
"""

from skills_hub.integrations.clock.abc import Clock


class FakeClock(Clock):
    """In-memory fake clock.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(self, start: int = 1_700_000_000_000, step: int = 0) -> None:
        """Create FakeClock.

        Args:
            start: Millisecond timestamp returned by the first read
            step: Milliseconds added after every read
        """
        self._now = start
        self._step = step
        self._read_count = 0

    @property
    def read_count(self) -> int:
        """Number of now_millis() calls made.

        This property is for test assertions only.
        """
        return self._read_count

    def now_millis(self) -> int:
        """Return the fake time and advance by the configured step."""
        self._read_count += 1
        current = self._now
        self._now += self._step
        return current
