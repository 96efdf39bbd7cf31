"""Materialize a skill directory into a destination parent by copy or symlink."""

import logging
import os
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from skills_hub.errors import ConfigValidationError, HubIOError, NotFoundError
from skills_hub.models.kit import SyncMode
from skills_hub.models.skill import SKILL_MARKER
from skills_hub.models.snapshot import PathKind
from skills_hub.paths import normalize_path, path_tail

logger = logging.getLogger(__name__)

IGNORED_COPY_NAMES = (".git",)


class ChangeType(str, Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    LINK = "link"


@dataclass(frozen=True)
class SyncChange:
    type: ChangeType
    src: str
    dest: str
    reason: str


@dataclass(frozen=True)
class SyncPlan:
    """What a sync would do, computed without touching the filesystem."""

    source: str
    destination: str
    mode: SyncMode
    changes: list[SyncChange] = field(default_factory=list)


@dataclass(frozen=True)
class SyncSummary:
    total: int = 0
    add: int = 0
    update: int = 0
    delete: int = 0
    link: int = 0


def path_exists_or_symlink(path: Path) -> bool:
    """True for existing paths and for symlinks, including dangling ones."""
    return os.path.lexists(path)


def path_kind(path: Path) -> PathKind:
    """Classify a path without following a symlink at its last component."""
    if not path_exists_or_symlink(path):
        return PathKind.MISSING
    if path.is_symlink():
        return PathKind.SYMLINK
    if path.is_dir():
        return PathKind.DIRECTORY
    if path.is_file():
        return PathKind.FILE
    return PathKind.OTHER


def is_same_location(source: Path, destination: Path) -> bool:
    """True when destination already is the source directory.

    Matches equal path strings and also paths that only differ through
    symlinked parents, e.g. an agent directory linked to the hub.
    """
    if normalize_path(source) == normalize_path(destination):
        return True
    if not path_exists_or_symlink(destination) or destination.is_symlink():
        return False
    try:
        return destination.resolve() == source.resolve()
    except OSError:
        return False


def remove_path(path: Path) -> None:
    """Remove a file, symlink or directory tree if present.

    Symlinks are removed themselves, never followed.
    """
    if not path_exists_or_symlink(path):
        return

    try:
        if path.is_symlink() or not path.is_dir():
            path.unlink()
        else:
            shutil.rmtree(path)
    except OSError as e:
        raise HubIOError(f"Failed to remove {path}", path, e) from e


def copy_skill_tree(source: Path, destination: Path) -> None:
    """Copy a directory tree, re-creating inner symlinks as symlinks and skipping .git."""
    try:
        shutil.copytree(
            source,
            destination,
            symlinks=True,
            ignore=shutil.ignore_patterns(*IGNORED_COPY_NAMES),
        )
    except OSError as e:
        raise HubIOError(f"Failed to copy {source} -> {destination}", destination, e) from e


def link_skill(source: Path, destination: Path) -> None:
    try:
        destination.symlink_to(source, target_is_directory=True)
    except OSError as e:
        raise HubIOError(
            f"Failed to create symlink {destination} -> {source}", destination, e
        ) from e


def _copy_changes(source: str, destination: str, kind: PathKind) -> list[SyncChange]:
    if kind == PathKind.MISSING:
        return [SyncChange(ChangeType.ADD, source, destination, "copy new skill directory")]
    if kind == PathKind.SYMLINK:
        return [
            SyncChange(
                ChangeType.DELETE, destination, destination, "remove existing symlink before copy"
            ),
            SyncChange(
                ChangeType.UPDATE,
                source,
                destination,
                "overwrite destination with copied directory",
            ),
        ]
    return [
        SyncChange(
            ChangeType.UPDATE,
            source,
            destination,
            f"overwrite existing {kind.value} with copied directory",
        )
    ]


def _link_changes(source: str, destination: str, kind: PathKind) -> list[SyncChange]:
    changes: list[SyncChange] = []
    if kind != PathKind.MISSING:
        changes.append(
            SyncChange(
                ChangeType.DELETE,
                destination,
                destination,
                f"remove existing {kind.value} before linking",
            )
        )
    changes.append(SyncChange(ChangeType.LINK, source, destination, "create symbolic link"))
    return changes


def preview_sync(source: Path, destination_parent: Path, mode: SyncMode) -> SyncPlan:
    """Describe the changes sync_skill would make, without making them.

    A destination that already is the source yields an empty change list.

    Raises:
        NotFoundError: If source does not exist or has no SKILL.md
    """
    _require_skill_dir(source)

    destination = destination_parent / path_tail(source)
    normalized_source = normalize_path(source)
    normalized_destination = normalize_path(destination)
    if is_same_location(source, destination):
        return SyncPlan(normalized_source, normalized_destination, mode)

    kind = path_kind(destination)
    match mode:
        case SyncMode.COPY:
            changes = _copy_changes(normalized_source, normalized_destination, kind)
        case SyncMode.LINK:
            changes = _link_changes(normalized_source, normalized_destination, kind)
    return SyncPlan(normalized_source, normalized_destination, mode, changes)


def summarize_changes(changes: list[SyncChange]) -> SyncSummary:
    counts = {change_type: 0 for change_type in ChangeType}
    for change in changes:
        counts[change.type] += 1
    return SyncSummary(
        total=len(changes),
        add=counts[ChangeType.ADD],
        update=counts[ChangeType.UPDATE],
        delete=counts[ChangeType.DELETE],
        link=counts[ChangeType.LINK],
    )


def sync_skill(source: Path, destination_parent: Path, mode: SyncMode) -> str:
    """Place the skill at ``destination_parent / <source dir name>``.

    An existing destination (file, directory or symlink) is replaced. When the
    destination is the source itself, directly or through a symlinked parent,
    nothing is touched.

    Returns:
        The normalized destination path

    Raises:
        NotFoundError: If source does not exist or has no SKILL.md
        HubIOError: If a filesystem operation fails
    """
    _require_skill_dir(source)

    try:
        destination_parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise HubIOError(
            f"Failed to create destination parent {destination_parent}", destination_parent, e
        ) from e

    destination = destination_parent / path_tail(source)
    normalized_destination = normalize_path(destination)
    if is_same_location(source, destination):
        logger.debug("Skill already in place: %s", normalized_destination)
        return normalized_destination

    remove_path(destination)

    match mode:
        case SyncMode.COPY:
            # The root is dereferenced; symlinks inside it are not
            resolved_source = source.resolve()
            if not resolved_source.is_dir():
                raise ConfigValidationError(f"Skill source is not a directory: {resolved_source}")
            copy_skill_tree(resolved_source, destination)
        case SyncMode.LINK:
            link_skill(source, destination)

    logger.debug("Synced skill %s -> %s (%s)", source, normalized_destination, mode.value)
    return normalized_destination


def _require_skill_dir(source: Path) -> None:
    if not source.exists():
        raise NotFoundError(f"Skill path does not exist: {source}")
    if not (source / SKILL_MARKER).exists():
        raise NotFoundError(f"{SKILL_MARKER} not found in {source}")
