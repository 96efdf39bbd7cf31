"""Tests for snapshot creation, pruning and rollback."""

import json
from pathlib import Path

import pytest

from skills_hub.errors import ConfigValidationError, NotFoundError
from skills_hub.ids import IdGenerator
from skills_hub.integrations.clock.fake import FakeClock
from skills_hub.models.kit import SyncMode
from skills_hub.models.snapshot import PathKind, SnapshotOperation, parse_retention
from skills_hub.operations.snapshots import SnapshotStore, normalize_affected_paths


def _store(tmp_path: Path) -> SnapshotStore:
    clock = FakeClock(start=1_000, step=1)
    return SnapshotStore(tmp_path / "snapshots", clock, IdGenerator(clock, start=1))


def _skill(path: Path, body: str) -> Path:
    path.mkdir(parents=True)
    (path / "SKILL.md").write_text(body, encoding="utf-8")
    return path


def test_rollback_restores_changed_dir_and_removes_added_path(tmp_path: Path) -> None:
    store = _store(tmp_path)
    existing = _skill(tmp_path / "agent" / "writer", "old\n")
    added = tmp_path / "agent" / "reviewer"

    created = store.create(
        SnapshotOperation.SYNC, "agent", SyncMode.COPY, [str(existing), str(added)]
    )
    (existing / "SKILL.md").write_text("new\n", encoding="utf-8")
    (existing / "extra.md").write_text("x", encoding="utf-8")
    _skill(added, "fresh\n")

    result = store.rollback(created.snapshot.id)

    assert (existing / "SKILL.md").read_text(encoding="utf-8") == "old\n"
    assert not (existing / "extra.md").exists()
    assert not added.exists()
    assert (result.total_paths, result.restored_paths, result.removed_paths) == (2, 1, 1)
    assert result.operation == SnapshotOperation.SYNC


def test_create_records_kinds_and_metadata(tmp_path: Path) -> None:
    store = _store(tmp_path)
    skill = _skill(tmp_path / "hub" / "writer", "body\n")
    link = tmp_path / "agent" / "writer"
    link.parent.mkdir()
    link.symlink_to(skill, target_is_directory=True)

    created = store.create(
        SnapshotOperation.KIT_APPLY,
        "starter -> /p (Codex)",
        SyncMode.LINK,
        [str(skill), str(link), str(tmp_path / "gone")],
    )

    snapshot = created.snapshot
    assert [entry.kind for entry in snapshot.entries] == [
        PathKind.DIRECTORY,
        PathKind.SYMLINK,
        PathKind.MISSING,
    ]
    assert snapshot.entries[2].archive_path is None
    metadata = json.loads(
        (store.root / snapshot.id / "metadata.json").read_text(encoding="utf-8")
    )
    assert metadata["operation"] == "kit-apply"
    assert metadata["mode"] == "link"
    assert (store.root / snapshot.id / "entries" / "0001-writer").is_symlink()


def test_rollback_recreates_symlink_as_link(tmp_path: Path) -> None:
    store = _store(tmp_path)
    skill = _skill(tmp_path / "hub" / "writer", "body\n")
    link = tmp_path / "agent" / "writer"
    link.parent.mkdir()
    link.symlink_to(skill, target_is_directory=True)
    created = store.create(SnapshotOperation.SYNC, "agent", SyncMode.COPY, [str(link)])
    link.unlink()
    _skill(link, "copied\n")

    store.rollback(created.snapshot.id)

    assert link.is_symlink()
    assert link.resolve() == skill.resolve()
    assert (skill / "SKILL.md").read_text(encoding="utf-8") == "body\n"


def test_list_is_newest_first_and_prune_keeps_retention(tmp_path: Path) -> None:
    store = _store(tmp_path)
    target = str(tmp_path / "t")
    ids = [
        store.create(SnapshotOperation.SYNC, "t", SyncMode.COPY, [target]).snapshot.id
        for _ in range(3)
    ]

    last = store.create(SnapshotOperation.SYNC, "t", SyncMode.COPY, [target], retention=2)

    assert last.pruned_ids == [ids[1], ids[0]]
    assert [record.id for record in store.list_snapshots()] == [last.snapshot.id, ids[2]]
    assert not (store.root / ids[0]).exists()


def test_latest_and_unreadable_snapshots(tmp_path: Path) -> None:
    store = _store(tmp_path)
    assert store.latest() is None

    created = store.create(SnapshotOperation.SYNC, "t", SyncMode.COPY, [str(tmp_path / "t")])
    broken = store.root / "snapshot-broken"
    broken.mkdir()
    (broken / "metadata.json").write_text("{not json", encoding="utf-8")

    latest = store.latest()
    assert latest is not None
    assert latest.id == created.snapshot.id
    assert len(store.list_snapshots()) == 1


def test_get_unknown_or_blank_id(tmp_path: Path) -> None:
    store = _store(tmp_path)

    with pytest.raises(NotFoundError, match="Snapshot not found: nope"):
        store.get("nope")
    with pytest.raises(ConfigValidationError, match="Snapshot id is required."):
        store.get("  ")


def test_create_requires_target_and_paths(tmp_path: Path) -> None:
    store = _store(tmp_path)

    with pytest.raises(ConfigValidationError, match="Snapshot target is required."):
        store.create(SnapshotOperation.SYNC, " ", SyncMode.COPY, [str(tmp_path)])
    with pytest.raises(ConfigValidationError, match="at least one affected path"):
        store.create(SnapshotOperation.SYNC, "t", SyncMode.COPY, ["", "  "])
    assert store.list_snapshots() == []


def test_rollback_with_missing_archive_raises(tmp_path: Path) -> None:
    store = _store(tmp_path)
    skill = _skill(tmp_path / "agent" / "writer", "body\n")
    created = store.create(SnapshotOperation.SYNC, "agent", SyncMode.COPY, [str(skill)])
    archive = store.root / created.snapshot.id / "entries" / "0000-writer"
    (archive / "SKILL.md").unlink()
    archive.rmdir()

    with pytest.raises(NotFoundError, match="Snapshot archive not found"):
        store.rollback(created.snapshot.id)


def test_affected_paths_are_normalized_and_deduplicated(tmp_path: Path) -> None:
    target = str(tmp_path / "a")

    assert normalize_affected_paths([target, f"{target}/", f" {target} "]) == [target]


@pytest.mark.parametrize("raw", ["0", "-3", "many", ""])
def test_parse_retention_rejects_non_positive(raw: str) -> None:
    with pytest.raises(ConfigValidationError, match="snapshot_retention must be a positive"):
        parse_retention(raw)


def test_parse_retention_accepts_integers() -> None:
    assert parse_retention(" 5 ") == 5
    assert parse_retention(7) == 7
