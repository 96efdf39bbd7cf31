"""Kit commands: policies, loadouts and applying them to a project."""

from pathlib import Path

import click

from skills_hub.cli.output import emit_json, new_table, print_dry_run, print_table
from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary
from skills_hub.models.kit import ApplyStatus, SyncMode
from skills_hub.models.snapshot import SnapshotOperation
from skills_hub.operations.kits import LoadoutItemInput

SYNC_MODE_CHOICE = click.Choice([mode.value for mode in SyncMode])


def _read_content(content: str | None, content_file: Path | None) -> str:
    if content is not None and content_file is not None:
        raise click.UsageError("Use either --content or --content-file, not both")
    if content_file is not None:
        return content_file.read_text(encoding="utf-8")
    if content is None:
        raise click.UsageError("One of --content or --content-file is required")
    return content


@click.group(name="kit")
def kit_group() -> None:
    """Manage kits (an AGENTS.md policy plus a skill loadout)."""


@kit_group.command(name="policy-list")
@click.pass_obj
@cli_error_boundary
def policy_list(ctx: HubContext) -> None:
    """List policies."""
    policies = ctx.hub.kit_policy_list()
    if not policies:
        click.echo("No policies")
        return
    table = new_table("id", "name", "description")
    for policy in policies:
        table.add_row(policy.id, policy.name, policy.description or "")
    print_table(table)


@kit_group.command(name="policy-add")
@click.option("--name", required=True)
@click.option("--description", default=None)
@click.option("--content", default=None, help="Policy text")
@click.option(
    "--content-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the policy text",
)
@click.pass_obj
@cli_error_boundary
def policy_add(
    ctx: HubContext,
    name: str,
    description: str | None,
    content: str | None,
    content_file: Path | None,
) -> None:
    """Add a policy."""
    policy = ctx.hub.kit_policy_add(name, _read_content(content, content_file), description)
    click.echo(f"Added {policy.id}")


@kit_group.command(name="policy-delete")
@click.argument("policy_id")
@click.pass_obj
@cli_error_boundary
def policy_delete(ctx: HubContext, policy_id: str) -> None:
    """Delete a policy that no kit uses."""
    ctx.hub.kit_policy_delete(policy_id)
    click.echo(f"Deleted {policy_id}")


@kit_group.command(name="loadout-list")
@click.pass_obj
@cli_error_boundary
def loadout_list(ctx: HubContext) -> None:
    """List loadouts."""
    loadouts = ctx.hub.kit_loadout_list()
    if not loadouts:
        click.echo("No loadouts")
        return
    table = new_table("id", "name", "skills")
    for loadout in loadouts:
        table.add_row(loadout.id, loadout.name, str(len(loadout.items)))
    print_table(table)


@kit_group.command(name="loadout-add")
@click.option("--name", required=True)
@click.option("--description", default=None)
@click.option("--skill", "skills", multiple=True, required=True, help="Skill path (repeatable)")
@click.option("--mode", type=SYNC_MODE_CHOICE, default=None, help="Sync mode for every skill")
@click.pass_obj
@cli_error_boundary
def loadout_add(
    ctx: HubContext,
    name: str,
    description: str | None,
    skills: tuple[str, ...],
    mode: str | None,
) -> None:
    """Add a loadout; skills keep the order given."""
    items = [
        LoadoutItemInput(skill_path=skill, mode=mode)
        for skill in skills
    ]
    loadout = ctx.hub.kit_loadout_add(name, items, description)
    click.echo(f"Added {loadout.id}")


@kit_group.command(name="loadout-delete")
@click.argument("loadout_id")
@click.pass_obj
@cli_error_boundary
def loadout_delete(ctx: HubContext, loadout_id: str) -> None:
    """Delete a loadout that no kit uses."""
    ctx.hub.kit_loadout_delete(loadout_id)
    click.echo(f"Deleted {loadout_id}")


@kit_group.command(name="list")
@click.pass_obj
@cli_error_boundary
def list_kits(ctx: HubContext) -> None:
    """List kits."""
    kits = ctx.hub.kit_list()
    if not kits:
        click.echo("No kits")
        return
    table = new_table("id", "name", "policy", "loadout", "last applied to")
    for kit in kits:
        target = kit.last_applied_target
        table.add_row(
            kit.id,
            kit.name,
            kit.policy_id,
            kit.loadout_id,
            f"{target.project_path} ({target.agent_name})" if target else "",
        )
    print_table(table)


@kit_group.command(name="add")
@click.option("--name", required=True)
@click.option("--policy", "policy_id", required=True)
@click.option("--loadout", "loadout_id", required=True)
@click.option("--description", default=None)
@click.pass_obj
@cli_error_boundary
def add(
    ctx: HubContext, name: str, policy_id: str, loadout_id: str, description: str | None
) -> None:
    """Add a kit."""
    kit = ctx.hub.kit_add(name, policy_id, loadout_id, description)
    click.echo(f"Added {kit.id}")


@kit_group.command(name="delete")
@click.argument("kit_id")
@click.pass_obj
@cli_error_boundary
def delete(ctx: HubContext, kit_id: str) -> None:
    """Delete a kit."""
    ctx.hub.kit_delete(kit_id)
    click.echo(f"Deleted {kit_id}")


@kit_group.command(name="apply")
@click.argument("kit_id")
@click.option("--project", "project_path", required=True, help="Project root")
@click.option("--agent", "agent_name", required=True, help="Agent whose skill directory to fill")
@click.option("--mode", type=SYNC_MODE_CHOICE, default=None, help="Override every item's mode")
@click.option("--overwrite-policy", is_flag=True, help="Replace an existing AGENTS.md")
@click.option("--dry-run", is_flag=True, help="Show the planned changes without applying them")
@click.option("--no-snapshot", is_flag=True, help="Do not snapshot the project targets first")
@click.option("--json", "as_json", is_flag=True, help="Print the full result as JSON")
@click.pass_obj
@cli_error_boundary
def apply(
    ctx: HubContext,
    kit_id: str,
    project_path: str,
    agent_name: str,
    mode: str | None,
    overwrite_policy: bool,
    dry_run: bool,
    no_snapshot: bool,
    as_json: bool,
) -> None:
    """Write the kit's policy and skills into a project."""
    sync_mode = SyncMode.parse(mode) if mode else None
    preview = ctx.hub.kit_apply_preview(
        kit_id, project_path, agent_name, mode=sync_mode, overwrite_policy=overwrite_policy
    )
    if dry_run:
        if as_json:
            emit_json(preview)
        else:
            print_dry_run(preview.changes, preview.warnings)
        return

    if not no_snapshot and not preview.policy_blocked:
        created = ctx.hub.snapshot_create(
            SnapshotOperation.KIT_APPLY,
            f"{preview.kit_name} -> {preview.project_path} ({agent_name})",
            sync_mode or SyncMode.COPY,
            preview.affected_paths,
        )
        click.echo(f"Snapshot created: {created.snapshot.id}", err=as_json)

    result = ctx.hub.kit_apply(
        kit_id,
        project_path,
        agent_name,
        mode=sync_mode,
        overwrite_policy=overwrite_policy,
    )
    if as_json:
        emit_json(result)
        return

    click.echo(f"Wrote {result.policy_path}")
    failed = 0
    for item in result.loadout_results:
        if item.status == ApplyStatus.SUCCESS:
            click.echo(f"  ok      {item.skill_path} -> {item.destination}")
        else:
            failed += 1
            click.echo(f"  failed  {item.skill_path}: {item.error}")
    if failed:
        click.echo(f"{failed} of {len(result.loadout_results)} skills failed", err=True)
