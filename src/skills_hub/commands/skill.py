"""Skill commands: list, sync between hub and agents, create and delete."""

from pathlib import Path

import click

from skills_hub.cli.output import emit_json, new_table, print_dry_run, print_table
from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary
from skills_hub.models.kit import SyncMode
from skills_hub.models.snapshot import SnapshotOperation

SYNC_MODE_CHOICE = click.Choice([mode.value for mode in SyncMode])


@click.group(name="skill")
def skill_group() -> None:
    """Manage skills in the hub, agent and project directories."""


@skill_group.command(name="list")
@click.pass_obj
@cli_error_boundary
def list_skills(ctx: HubContext) -> None:
    """List every skill found in the hub, agent and project directories."""
    skills = ctx.hub.skill_list()
    if not skills:
        click.echo("No skills found")
        return

    table = new_table("name", "location", "agent", "path")
    for skill in skills:
        table.add_row(skill.name, skill.location.value, skill.agent_name or "", skill.path)
    print_table(table)


@skill_group.command(name="show")
@click.argument("path")
@click.pass_obj
@cli_error_boundary
def show(ctx: HubContext, path: str) -> None:
    """Print a skill's metadata and body."""
    document = ctx.hub.skill_get_content(path)
    for key, value in document.metadata.items():
        click.echo(f"{key}: {value}")
    if document.metadata:
        click.echo("")
    click.echo(document.content)


@skill_group.command(name="sync")
@click.argument("source")
@click.argument("dest_parent")
@click.option("--mode", type=SYNC_MODE_CHOICE, default=None, help="copy or link")
@click.option("--dry-run", is_flag=True, help="Show the planned changes without applying them")
@click.option("--no-snapshot", is_flag=True, help="Do not snapshot the destination first")
@click.option("--json", "as_json", is_flag=True, help="With --dry-run, print the plan as JSON")
@click.pass_obj
@cli_error_boundary
def sync(
    ctx: HubContext,
    source: str,
    dest_parent: str,
    mode: str | None,
    dry_run: bool,
    no_snapshot: bool,
    as_json: bool,
) -> None:
    """Copy or link the skill at SOURCE into DEST_PARENT, replacing any existing one."""
    sync_mode = SyncMode.parse(mode) if mode else ctx.global_config.default_sync_mode
    plan = ctx.hub.skill_sync_preview(source, dest_parent, sync_mode)
    if dry_run:
        if as_json:
            emit_json(plan)
        else:
            print_dry_run(plan.changes)
        return

    if plan.changes and not no_snapshot:
        created = ctx.hub.snapshot_create(
            SnapshotOperation.SYNC, dest_parent, sync_mode, [plan.destination]
        )
        click.echo(f"Snapshot created: {created.snapshot.id}")

    destination = ctx.hub.skill_sync(source, dest_parent, sync_mode)
    click.echo(f"Synced to {destination}")


@skill_group.command(name="conflicts")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_obj
@cli_error_boundary
def conflicts(ctx: HubContext, as_json: bool) -> None:
    """Report skills installed from more than one place."""
    report = ctx.hub.skill_conflicts()
    if as_json:
        emit_json(report)
        return
    if not report.conflicts:
        click.echo(f"No conflicts found ({report.item_count} skills scanned)")
        return

    table = new_table("type", "key", "source", "path")
    for conflict in report.conflicts:
        for item in conflict.items:
            table.add_row(conflict.type.value, conflict.key, item.source_label, item.path)
    print_table(table)
    click.echo(f"{report.conflict_count} conflicts in {report.item_count} skills")
    for conflict in report.conflicts:
        click.echo(f"  {conflict.key}: {conflict.resolution}")


@skill_group.command(name="collect")
@click.argument("source")
@click.pass_obj
@cli_error_boundary
def collect(ctx: HubContext, source: str) -> None:
    """Copy an agent or project skill into the hub."""
    destination = ctx.hub.skill_collect_to_hub(source)
    click.echo(f"Collected to {destination}")


@skill_group.command(name="create")
@click.option("--name", required=True)
@click.option("--description", default="")
@click.option("--content", default=None, help="Skill body")
@click.option(
    "--content-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the skill body",
)
@click.pass_obj
@cli_error_boundary
def create(
    ctx: HubContext,
    name: str,
    description: str,
    content: str | None,
    content_file: Path | None,
) -> None:
    """Create a new skill in the hub."""
    if content is not None and content_file is not None:
        raise click.UsageError("Use either --content or --content-file, not both")
    body = content_file.read_text(encoding="utf-8") if content_file is not None else content or ""
    path = ctx.hub.skill_create(name, description, body)
    click.echo(f"Created {path}")


@skill_group.command(name="delete")
@click.argument("path")
@click.option("--force", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
@cli_error_boundary
def delete(ctx: HubContext, path: str, force: bool) -> None:
    """Delete the skill directory (or link) at PATH."""
    if not force:
        click.confirm(f"Delete {path}?", abort=True)
    ctx.hub.skill_delete(path)
    click.echo(f"Deleted {path}")
