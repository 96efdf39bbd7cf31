"""Project commands: registered project roots and scan roots."""

import click

from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary


@click.group(name="project")
def project_group() -> None:
    """Manage the projects whose skill directories are indexed."""


@project_group.command(name="list")
@click.pass_obj
@cli_error_boundary
def list_projects(ctx: HubContext) -> None:
    """List registered projects and scan roots."""
    config = ctx.hub.config_get()
    if not config.projects:
        click.echo("No projects")
    for project in config.projects:
        click.echo(project)
    if config.scan_roots:
        click.echo("")
        click.echo("Scan roots:")
        for root in config.scan_roots:
            click.echo(f"  {root}")


@project_group.command(name="add")
@click.argument("path")
@click.pass_obj
@cli_error_boundary
def add(ctx: HubContext, path: str) -> None:
    """Register a project root."""
    normalized = ctx.hub.project_add(path)
    click.echo(f"Added {normalized}")


@project_group.command(name="remove")
@click.argument("path")
@click.pass_obj
@cli_error_boundary
def remove(ctx: HubContext, path: str) -> None:
    """Unregister a project root."""
    if not ctx.hub.project_remove(path):
        click.echo(f"Not registered: {path}")
        return
    click.echo(f"Removed {path}")


@project_group.command(name="scan")
@click.option("--add", "add_found", is_flag=True, help="Register every project found")
@click.pass_obj
@cli_error_boundary
def scan(ctx: HubContext, add_found: bool) -> None:
    """Find git repositories under the scan roots (or the home directory)."""
    found = ctx.hub.scan_projects()
    for project in found:
        click.echo(project)
    if add_found:
        added = ctx.hub.scanned_projects_add(found)
        click.echo(f"Registered {added} new project(s)")


@project_group.command(name="scan-root-add")
@click.argument("path")
@click.pass_obj
@cli_error_boundary
def scan_root_add(ctx: HubContext, path: str) -> None:
    """Add a directory to search for projects."""
    normalized = ctx.hub.scan_root_add(path)
    click.echo(f"Added scan root {normalized}")


@project_group.command(name="scan-root-remove")
@click.argument("path")
@click.pass_obj
@cli_error_boundary
def scan_root_remove(ctx: HubContext, path: str) -> None:
    """Remove a scan root."""
    if not ctx.hub.scan_root_remove(path):
        click.echo(f"Not a scan root: {path}")
        return
    click.echo(f"Removed scan root {path}")
