"""Persistence of the whole hub state as one JSON document."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import ValidationError

from skills_hub.errors import ConfigValidationError, HubIOError
from skills_hub.io.atomic import write_text_atomic
from skills_hub.models.state import HubState

logger = logging.getLogger(__name__)

STATE_DIR_NAME = ".skills-hub"
STATE_FILE_NAME = "desktop-state.json"


def default_state_path(home: Path) -> Path:
    return home / STATE_DIR_NAME / STATE_FILE_NAME


class StateStore(ABC):
    """Abstract interface for hub state persistence.

    Implementations include:
    - FilesystemStateStore: JSON file on disk
    - InMemoryStateStore: for testing
    """

    @abstractmethod
    def load(self) -> HubState | None:
        """Load the persisted state.

        Returns:
            The state, or None if nothing has been persisted yet

        Raises:
            ConfigValidationError: If persisted state exists but is malformed
        """
        ...

    @abstractmethod
    def save(self, state: HubState) -> None:
        """Persist a full state snapshot.

        Raises:
            HubIOError: If the snapshot cannot be written
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Location of the state (for error messages and debugging)."""
        ...


class FilesystemStateStore(StateStore):
    """Production implementation writing ``desktop-state.json`` atomically."""

    def __init__(self, state_path: Path) -> None:
        self._state_path = state_path

    def load(self) -> HubState | None:
        if not self._state_path.exists():
            logger.debug("No state file at %s", self._state_path)
            return None

        try:
            content = self._state_path.read_text(encoding="utf-8")
        except OSError as e:
            raise HubIOError(f"Failed to read state {self._state_path}", self._state_path, e) from e

        try:
            return HubState.model_validate_json(content)
        except ValidationError as e:
            raise ConfigValidationError(
                f"State file {self._state_path} is malformed. "
                f"Fix or remove it to start over.\n{e}"
            ) from e

    def save(self, state: HubState) -> None:
        logger.debug("Persisting state to %s", self._state_path)
        try:
            write_text_atomic(self._state_path, state.model_dump_json(indent=2) + "\n")
        except OSError as e:
            raise HubIOError(
                f"Failed to write state {self._state_path}", self._state_path, e
            ) from e

    def path(self) -> Path:
        return self._state_path


class InMemoryStateStore(StateStore):
    """Test implementation that keeps every saved snapshot in memory."""

    def __init__(self, state: HubState | None = None, save_error: HubIOError | None = None) -> None:
        """Initialize in-memory state store.

        Args:
            state: Initially persisted state (None = nothing persisted)
            save_error: If set, every save() raises this error
        """
        self._state = state
        self._save_error = save_error
        self._saved: list[HubState] = []

    @property
    def saved(self) -> list[HubState]:
        """Snapshots passed to save(), in order.

        This property is for test assertions only.
        """
        return list(self._saved)

    def load(self) -> HubState | None:
        return self._state

    def save(self, state: HubState) -> None:
        if self._save_error is not None:
            raise self._save_error
        self._saved.append(state)
        self._state = state

    def path(self) -> Path:
        return Path("/fake/skills-hub/desktop-state.json")
