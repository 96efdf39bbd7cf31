"""CLI tests for snapshot list, show and rollback."""

import json
from pathlib import Path

from click.testing import CliRunner

from skills_hub.cli import cli
from skills_hub.context import HubContext
from skills_hub.models.kit import SyncMode
from skills_hub.models.snapshot import SnapshotOperation


def test_list_without_snapshots(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(cli, ["snapshot", "list"], obj=HubContext.for_test(home=tmp_path))

    assert result.exit_code == 0
    assert "No snapshots found." in result.output


def test_list_and_show(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    created = ctx.hub.snapshot_create(
        SnapshotOperation.SYNC, "agent", SyncMode.COPY, [str(tmp_path / "agent" / "x")]
    )
    snapshot_id = created.snapshot.id

    listed = runner.invoke(cli, ["snapshot", "list"], obj=ctx)
    shown = runner.invoke(cli, ["snapshot", "show", snapshot_id], obj=ctx)

    assert listed.exit_code == 0, listed.output
    assert snapshot_id in listed.output
    assert "2023-11-14 22:13:20" in listed.output
    assert json.loads(shown.output)["entries"] == [
        {"path": str(tmp_path / "agent" / "x"), "kind": "missing", "archive_path": None}
    ]


def test_rollback_by_id_removes_created_path(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)
    target = tmp_path / "agent" / "x"
    created = ctx.hub.snapshot_create(SnapshotOperation.SYNC, "agent", SyncMode.COPY, [str(target)])
    target.mkdir(parents=True)

    result = runner.invoke(cli, ["snapshot", "rollback", created.snapshot.id], obj=ctx)

    assert result.exit_code == 0, result.output
    assert f"Snapshot rolled back: {created.snapshot.id} (sync agent)" in result.output
    assert "restored=0 removed=1" in result.output
    assert not target.exists()


def test_rollback_needs_exactly_one_selector(tmp_path: Path) -> None:
    runner = CliRunner()
    ctx = HubContext.for_test(home=tmp_path)

    neither = runner.invoke(cli, ["snapshot", "rollback"], obj=ctx)
    both = runner.invoke(cli, ["snapshot", "rollback", "snapshot-1", "--last"], obj=ctx)

    assert neither.exit_code == 2
    assert "Pass SNAPSHOT_ID or --last" in neither.output
    assert both.exit_code == 2


def test_rollback_last_without_snapshots(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["snapshot", "rollback", "--last"], obj=HubContext.for_test(home=tmp_path)
    )

    assert result.exit_code == 1
    assert "Error: No snapshots found." in result.output


def test_show_unknown_snapshot(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli, ["snapshot", "show", "snapshot-0-0"], obj=HubContext.for_test(home=tmp_path)
    )

    assert result.exit_code == 1
    assert "Error: Snapshot not found: snapshot-0-0" in result.output
