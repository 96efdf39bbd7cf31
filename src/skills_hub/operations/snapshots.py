"""Filesystem snapshots of sync and kit-apply targets, with rollback.

Each snapshot is a directory under ``~/.skills-hub/snapshots/<id>`` holding a
``metadata.json`` and an ``entries/`` folder with a copy of every affected
path as it was before the operation. Paths that did not exist are recorded as
``missing`` so rollback can remove what the operation created.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from skills_hub.errors import ConfigValidationError, HubIOError, NotFoundError
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.abc import Clock
from skills_hub.io.atomic import write_json_atomic
from skills_hub.models.kit import SyncMode
from skills_hub.models.snapshot import (
    DEFAULT_SNAPSHOT_RETENTION,
    PathKind,
    SnapshotEntry,
    SnapshotOperation,
    SnapshotRecord,
)
from skills_hub.operations.skill_sync import path_kind, remove_path
from skills_hub.paths import normalize_path, path_tail

logger = logging.getLogger(__name__)

SNAPSHOTS_DIR_NAME = "snapshots"
METADATA_FILE_NAME = "metadata.json"
ENTRIES_DIR_NAME = "entries"


@dataclass(frozen=True)
class SnapshotCreateResult:
    snapshot: SnapshotRecord
    retention: int
    pruned_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RollbackResult:
    id: str
    operation: SnapshotOperation
    target: str
    total_paths: int
    restored_paths: int
    removed_paths: int


def normalize_affected_paths(affected_paths: list[str]) -> list[str]:
    """Absolute, normalized and de-duplicated, in first-seen order.

    Raises:
        ConfigValidationError: If no non-blank path remains
    """
    unique: list[str] = []
    for candidate in affected_paths:
        if not candidate.strip():
            continue
        normalized = normalize_path(os.path.abspath(candidate.strip()))
        if normalized not in unique:
            unique.append(normalized)
    if not unique:
        raise ConfigValidationError("A snapshot needs at least one affected path.")
    return unique


def _sequence(snapshot_id: str) -> int:
    tail = snapshot_id.rsplit("-", 1)[-1]
    return int(tail) if tail.isdigit() else 0


def _copy_preserving_links(source: Path, destination: Path) -> None:
    if source.is_symlink():
        destination.symlink_to(os.readlink(source))
    elif source.is_dir():
        shutil.copytree(source, destination, symlinks=True)
    else:
        shutil.copy2(source, destination, follow_symlinks=False)


class SnapshotStore:
    """Snapshot directories under one root, newest first."""

    def __init__(self, root: Path, clock: Clock, ids: IdGenerator) -> None:
        self._root = root
        self._clock = clock
        self._ids = ids

    @property
    def root(self) -> Path:
        return self._root

    def create(
        self,
        operation: SnapshotOperation,
        target: str,
        mode: SyncMode,
        affected_paths: list[str],
        retention: int = DEFAULT_SNAPSHOT_RETENTION,
    ) -> SnapshotCreateResult:
        """Archive every affected path, then prune beyond ``retention``.

        Raises:
            ConfigValidationError: If target is blank or no path is given
            HubIOError: If an affected path cannot be archived
        """
        if not target.strip():
            raise ConfigValidationError("Snapshot target is required.")
        paths = normalize_affected_paths(affected_paths)

        snapshot_id = self._ids.next_id("snapshot")
        snapshot_dir = self._root / snapshot_id
        entries_dir = snapshot_dir / ENTRIES_DIR_NAME

        entries: list[SnapshotEntry] = []
        try:
            entries_dir.mkdir(parents=True)
            for index, raw_path in enumerate(paths):
                path = Path(raw_path)
                kind = path_kind(path)
                if kind == PathKind.MISSING:
                    entries.append(SnapshotEntry(path=raw_path, kind=kind))
                    continue
                archive_name = f"{index:04d}-{path_tail(raw_path) or 'entry'}"
                _copy_preserving_links(path, entries_dir / archive_name)
                entries.append(
                    SnapshotEntry(
                        path=raw_path,
                        kind=kind,
                        archive_path=f"{ENTRIES_DIR_NAME}/{archive_name}",
                    )
                )
        except OSError as e:
            raise HubIOError(f"Failed to create snapshot {snapshot_id}", snapshot_dir, e) from e

        record = SnapshotRecord(
            id=snapshot_id,
            created_at=self._clock.now_millis(),
            operation=operation,
            target=target.strip(),
            mode=mode,
            affected_paths=paths,
            entries=entries,
        )
        write_json_atomic(snapshot_dir / METADATA_FILE_NAME, record.model_dump(mode="json"))
        logger.debug(
            "Created snapshot %s for %s (%d paths)", snapshot_id, operation.value, len(paths)
        )

        pruned = self.prune(retention)
        return SnapshotCreateResult(snapshot=record, retention=retention, pruned_ids=pruned)

    def list_snapshots(self) -> list[SnapshotRecord]:
        """Readable snapshots, newest first. Unreadable directories are skipped."""
        if not self._root.is_dir():
            return []

        records: list[SnapshotRecord] = []
        for snapshot_dir in self._root.iterdir():
            metadata_path = snapshot_dir / METADATA_FILE_NAME
            if not metadata_path.is_file():
                continue
            try:
                records.append(
                    SnapshotRecord.model_validate_json(metadata_path.read_text(encoding="utf-8"))
                )
            except (OSError, ValidationError) as e:
                logger.debug("Skipping unreadable snapshot %s: %s", snapshot_dir, e)

        return sorted(
            records, key=lambda record: (record.created_at, _sequence(record.id)), reverse=True
        )

    def get(self, snapshot_id: str) -> SnapshotRecord:
        """Raises NotFoundError if the id has no readable metadata."""
        normalized_id = snapshot_id.strip()
        if not normalized_id:
            raise ConfigValidationError("Snapshot id is required.")
        for record in self.list_snapshots():
            if record.id == normalized_id:
                return record
        raise NotFoundError(f"Snapshot not found: {normalized_id}")

    def latest(self) -> SnapshotRecord | None:
        snapshots = self.list_snapshots()
        return snapshots[0] if snapshots else None

    def prune(self, retention: int) -> list[str]:
        """Delete every snapshot beyond the newest ``retention`` ones."""
        stale = self.list_snapshots()[retention:]
        removed: list[str] = []
        for record in stale:
            remove_path(self._root / record.id)
            removed.append(record.id)
        if removed:
            logger.debug("Pruned snapshots: %s", ", ".join(removed))
        return removed

    def rollback(self, snapshot_id: str) -> RollbackResult:
        """Put every affected path back the way the snapshot found it.

        Deeper paths are restored first. Paths recorded as missing are removed.

        Raises:
            NotFoundError: If the snapshot or one of its archives is missing
            ConfigValidationError: If an archive path escapes the snapshot directory
            HubIOError: If a path cannot be removed or restored
        """
        record = self.get(snapshot_id)
        snapshot_dir = Path(os.path.normpath(self._root / record.id))

        restored = 0
        removed = 0
        for entry in sorted(record.entries, key=lambda item: len(item.path), reverse=True):
            target = Path(entry.path)
            if entry.kind == PathKind.MISSING:
                remove_path(target)
                removed += 1
                continue

            if not entry.archive_path:
                raise NotFoundError(f"Snapshot entry has no archive: {entry.path}")
            archive = Path(os.path.normpath(snapshot_dir / entry.archive_path))
            if not archive.is_relative_to(snapshot_dir):
                raise ConfigValidationError(f"Invalid snapshot archive path: {entry.archive_path}")
            if not os.path.lexists(archive):
                raise NotFoundError(f"Snapshot archive not found for path: {entry.path}")

            remove_path(target)
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                _copy_preserving_links(archive, target)
            except OSError as e:
                raise HubIOError(f"Failed to restore {target}", target, e) from e
            restored += 1

        logger.debug("Rolled back snapshot %s", record.id)
        return RollbackResult(
            id=record.id,
            operation=record.operation,
            target=record.target,
            total_paths=len(record.entries),
            restored_paths=restored,
            removed_paths=removed,
        )
