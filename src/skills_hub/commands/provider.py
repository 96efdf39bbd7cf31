"""Provider commands: list, switch, restore and capture tool configurations."""

from pathlib import Path

import click

from skills_hub.cli.output import emit_json, new_table, parse_json_object, print_table
from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary
from skills_hub.models.app_type import AppType
from skills_hub.operations.masking import mask_secrets

APP_TYPE_CHOICE = click.Choice([app_type.value for app_type in AppType])


def _read_config(config_json: str | None, config_file: Path | None) -> dict | None:
    if config_json is not None and config_file is not None:
        raise click.UsageError("Use either --config or --config-file, not both")
    if config_file is not None:
        return parse_json_object(config_file.read_text(encoding="utf-8"), str(config_file))
    if config_json is not None:
        return parse_json_object(config_json, "--config")
    return None


@click.group(name="provider")
def provider_group() -> None:
    """Manage per-tool providers and switch between them."""


@provider_group.command(name="list")
@click.option("--app", "app", type=APP_TYPE_CHOICE, default=None, help="Only this tool")
@click.pass_obj
@cli_error_boundary
def list_providers(ctx: HubContext, app: str | None) -> None:
    """List stored providers."""
    records = ctx.hub.provider_list(AppType.parse(app) if app else None)
    if not records:
        click.echo("No providers")
        return

    table = new_table("id", "app", "name", "current")
    for record in records:
        marker = "*" if record.is_current else ""
        table.add_row(record.id, record.app_type.value, record.name, marker)
    print_table(table)


@provider_group.command(name="current")
@click.argument("app", type=APP_TYPE_CHOICE)
@click.pass_obj
@cli_error_boundary
def current(ctx: HubContext, app: str) -> None:
    """Show the current provider of APP."""
    record = ctx.hub.provider_current(AppType.parse(app))
    if record is None:
        click.echo(f"No current provider for {app}")
        return
    click.echo(f"{record.id}  {record.name}")


@provider_group.command(name="show")
@click.argument("provider_id")
@click.option("--raw", is_flag=True, help="Do not mask secrets")
@click.pass_obj
@cli_error_boundary
def show(ctx: HubContext, provider_id: str, raw: bool) -> None:
    """Print a provider record as JSON."""
    data = ctx.hub.provider_get(provider_id).model_dump(mode="json")
    if not raw:
        data["config"] = mask_secrets(data["config"])
    emit_json(data)


@provider_group.command(name="add")
@click.argument("app", type=APP_TYPE_CHOICE)
@click.option("--name", default="", help="Display name")
@click.option("--config", "config_json", default=None, help="Provider document as JSON")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the provider document as JSON",
)
@click.pass_obj
@cli_error_boundary
def add(
    ctx: HubContext, app: str, name: str, config_json: str | None, config_file: Path | None
) -> None:
    """Add a provider for APP."""
    config = _read_config(config_json, config_file)
    record = ctx.hub.provider_add(AppType.parse(app), name, config if config is not None else {})
    suffix = " (current)" if record.is_current else ""
    click.echo(f"Added {record.id}{suffix}")


@provider_group.command(name="update")
@click.argument("provider_id")
@click.option("--name", default=None, help="New display name")
@click.option("--config", "config_json", default=None, help="Replacement document as JSON")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the replacement document as JSON",
)
@click.pass_obj
@cli_error_boundary
def update(
    ctx: HubContext,
    provider_id: str,
    name: str | None,
    config_json: str | None,
    config_file: Path | None,
) -> None:
    """Rename a provider or replace its document.

    Replacing the document of the current provider rewrites the live files.
    """
    record = ctx.hub.provider_update(provider_id, name, _read_config(config_json, config_file))
    click.echo(f"Updated {record.id}")


@provider_group.command(name="delete")
@click.argument("provider_id")
@click.pass_obj
@cli_error_boundary
def delete(ctx: HubContext, provider_id: str) -> None:
    """Delete a provider."""
    ctx.hub.provider_delete(provider_id)
    click.echo(f"Deleted {provider_id}")


@provider_group.command(name="switch")
@click.argument("app", type=APP_TYPE_CHOICE)
@click.argument("provider_id")
@click.pass_obj
@cli_error_boundary
def switch(ctx: HubContext, app: str, provider_id: str) -> None:
    """Make PROVIDER_ID the current provider of APP and write its live config."""
    result = ctx.hub.provider_switch(AppType.parse(app), provider_id)
    click.echo(f"Switched {app}: {result.switched_from or '-'} -> {result.switched_to}")


@provider_group.command(name="backup")
@click.argument("app", type=APP_TYPE_CHOICE)
@click.option("--raw", is_flag=True, help="Do not mask secrets")
@click.pass_obj
@cli_error_boundary
def backup(ctx: HubContext, app: str, raw: bool) -> None:
    """Show the newest backup of APP."""
    entry = ctx.hub.provider_latest_backup(AppType.parse(app))
    if entry is None:
        click.echo(f"No backup for {app}")
        return
    data = entry.model_dump(mode="json")
    if not raw:
        data["provider"]["config"] = mask_secrets(data["provider"]["config"])
    emit_json(data)


@provider_group.command(name="restore")
@click.argument("app", type=APP_TYPE_CHOICE)
@click.pass_obj
@cli_error_boundary
def restore(ctx: HubContext, app: str) -> None:
    """Re-apply the newest backup of APP (the backup is kept)."""
    result = ctx.hub.provider_restore_latest_backup(AppType.parse(app))
    click.echo(f"Restored {app}: {result.switched_to}")


@provider_group.command(name="capture")
@click.argument("app", type=APP_TYPE_CHOICE)
@click.option("--name", default="", help="Display name")
@click.option("--profile", "profile_json", default=None, help="Extra profile fields as JSON")
@click.pass_obj
@cli_error_boundary
def capture(ctx: HubContext, app: str, name: str, profile_json: str | None) -> None:
    """Store the live login of APP as an official provider (secrets scrubbed)."""
    profile = parse_json_object(profile_json, "--profile") if profile_json is not None else None
    record = ctx.hub.provider_capture_live(AppType.parse(app), name, profile)
    click.echo(f"Captured {record.id}")
