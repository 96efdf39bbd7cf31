"""Error taxonomy for skills-hub operations.

Every error derives from HubError and from the closest builtin exception so the
CLI error boundary (which catches ValueError, FileExistsError, etc.) renders
them without a stack trace.
"""

from pathlib import Path


class HubError(Exception):
    """Base class for all skills-hub errors."""


class NotFoundError(HubError, LookupError):
    """A provider, kit, policy, loadout, backup or skill does not exist."""


class ConfigValidationError(HubError, ValueError):
    """A document or input failed a structural requirement."""


class AlreadyExistsError(HubError, FileExistsError):
    """A target path already exists and overwriting was not requested."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        return str(self.args[0])


class HubIOError(HubError, OSError):
    """A filesystem operation failed.

    Attributes:
        path: The path the failing operation targeted
        cause: The underlying OSError
    """

    def __init__(self, message: str, path: Path | str, cause: OSError | None = None) -> None:
        super().__init__(message)
        self.path = str(path)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is None:
            return str(self.args[0])
        return f"{self.args[0]}: {self.cause}"


class LockUnavailableError(HubError):
    """The state lock could not be acquired."""
