"""Snapshot commands: list what sync and kit apply saved, and roll it back."""

from datetime import UTC, datetime

import click

from skills_hub.cli.output import emit_json, new_table, print_table
from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary


def _format_millis(millis: int) -> str:
    return datetime.fromtimestamp(millis / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


@click.group(name="snapshot")
def snapshot_group() -> None:
    """Inspect and roll back snapshots taken before sync and kit apply."""


@snapshot_group.command(name="list")
@click.option("--json", "as_json", is_flag=True, help="Print snapshots as JSON")
@click.pass_obj
@cli_error_boundary
def list_snapshots(ctx: HubContext, as_json: bool) -> None:
    """List snapshots, newest first."""
    snapshots = ctx.hub.snapshot_list()
    if as_json:
        emit_json(snapshots)
        return
    if not snapshots:
        click.echo("No snapshots found.")
        return

    table = new_table("id", "created", "operation", "target", "paths")
    for snapshot in snapshots:
        table.add_row(
            snapshot.id,
            _format_millis(snapshot.created_at),
            snapshot.operation.value,
            snapshot.target,
            str(len(snapshot.entries)),
        )
    print_table(table)


@snapshot_group.command(name="show")
@click.argument("snapshot_id")
@click.pass_obj
@cli_error_boundary
def show(ctx: HubContext, snapshot_id: str) -> None:
    """Print a snapshot's metadata as JSON."""
    emit_json(ctx.hub.snapshot_get(snapshot_id))


@snapshot_group.command(name="rollback")
@click.argument("snapshot_id", required=False)
@click.option("--last", "use_last", is_flag=True, help="Roll back the newest snapshot")
@click.pass_obj
@cli_error_boundary
def rollback(ctx: HubContext, snapshot_id: str | None, use_last: bool) -> None:
    """Restore every path recorded in SNAPSHOT_ID (or the newest with --last)."""
    if use_last and snapshot_id is not None:
        raise click.UsageError("Pass either SNAPSHOT_ID or --last, not both")

    if use_last:
        result = ctx.hub.snapshot_rollback_latest()
    elif snapshot_id is not None:
        result = ctx.hub.snapshot_rollback(snapshot_id)
    else:
        raise click.UsageError("Pass SNAPSHOT_ID or --last")

    click.echo(
        f"Snapshot rolled back: {result.id} ({result.operation.value} {result.target}) "
        f"restored={result.restored_paths} removed={result.removed_paths}"
    )
