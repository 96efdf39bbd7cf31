"""Real clock implementation using time.time_ns()."""

import time

from skills_hub.integrations.clock.abc import Clock


class RealClock(Clock):
    """Production implementation reading the system clock."""

    def now_millis(self) -> int:
        """Return wall-clock time in milliseconds."""
        return time.time_ns() // 1_000_000
