"""Snapshots of filesystem targets taken before sync and kit apply."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from skills_hub.errors import ConfigValidationError
from skills_hub.models.kit import SyncMode

SNAPSHOT_FORMAT_VERSION = 1
DEFAULT_SNAPSHOT_RETENTION = 20


class PathKind(str, Enum):
    """What occupies a path, judged without following a final symlink."""

    MISSING = "missing"
    SYMLINK = "symlink"
    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"


class SnapshotOperation(str, Enum):
    SYNC = "sync"
    KIT_APPLY = "kit-apply"

    @classmethod
    def parse(cls, raw: str) -> "SnapshotOperation":
        normalized = raw.strip().lower()
        for operation in cls:
            if operation.value == normalized:
                return operation
        raise ConfigValidationError(f"Unsupported snapshot operation: {raw}")


class SnapshotEntry(BaseModel):
    """One affected path; ``archive_path`` is relative to the snapshot directory."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: PathKind
    archive_path: str | None = None


class SnapshotRecord(BaseModel):
    """Contents of a snapshot's metadata.json."""

    model_config = ConfigDict(frozen=True)

    version: int = SNAPSHOT_FORMAT_VERSION
    id: str
    created_at: int
    operation: SnapshotOperation
    target: str
    mode: SyncMode = SyncMode.COPY
    affected_paths: list[str] = Field(default_factory=list)
    entries: list[SnapshotEntry] = Field(default_factory=list)


def parse_retention(raw: object) -> int:
    """Parse a positive snapshot retention count.

    Raises:
        ConfigValidationError: If raw is not a positive integer
    """
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise ConfigValidationError(
            f"snapshot_retention must be a positive integer, got {raw!r}"
        ) from None
    if value <= 0:
        raise ConfigValidationError("snapshot_retention must be a positive integer")
    return value
