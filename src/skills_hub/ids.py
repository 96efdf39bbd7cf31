"""Record id generation."""

import threading

from skills_hub.integrations.clock.abc import Clock


class IdGenerator:
    """Generates ids of the form ``<prefix>-<millis>-<sequence>``.

    The sequence starts at the clock reading taken at construction (or at an
    explicit ``start``) and increases by one per id, so ids stay unique even when
    several are generated within the same millisecond.
    """

    def __init__(self, clock: Clock, start: int | None = None) -> None:
        self._clock = clock
        self._sequence = start if start is not None else max(clock.now_millis(), 1)
        self._lock = threading.Lock()

    def next_id(self, prefix: str) -> str:
        with self._lock:
            sequence = self._sequence
            self._sequence += 1
        return f"{prefix}-{self._clock.now_millis()}-{sequence}"
