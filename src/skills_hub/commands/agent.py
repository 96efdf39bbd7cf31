"""Agent commands."""

import click

from skills_hub.cli.output import new_table, print_table
from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary
from skills_hub.models.config import DEFAULT_AGENT_PROJECT_PATH, AgentConfig


@click.group(name="agent")
def agent_group() -> None:
    """Manage the agents whose skill directories are indexed."""


@agent_group.command(name="list")
@click.pass_obj
@cli_error_boundary
def list_agents(ctx: HubContext) -> None:
    """List agents."""
    table = new_table("name", "enabled", "global path", "project path")
    for agent in ctx.hub.config_get().agents:
        name = f"{agent.name} (custom)" if agent.is_custom else agent.name
        table.add_row(name, "yes" if agent.enabled else "no", agent.global_path, agent.project_path)
    print_table(table)


@agent_group.command(name="set")
@click.argument("name")
@click.option("--global-path", default=None, help="Global skill directory")
@click.option("--project-path", default=None, help="Skill directory relative to a project")
@click.option("--enable/--disable", "enabled", default=None)
@click.pass_obj
@cli_error_boundary
def set_agent(
    ctx: HubContext,
    name: str,
    global_path: str | None,
    project_path: str | None,
    enabled: bool | None,
) -> None:
    """Add an agent or change an existing one."""
    existing = ctx.hub.config_get().find_agent(name)
    if existing is None:
        if global_path is None:
            raise click.UsageError("--global-path is required for a new agent")
        agent = AgentConfig(
            name=name,
            global_path=global_path,
            project_path=project_path or DEFAULT_AGENT_PROJECT_PATH,
            enabled=True if enabled is None else enabled,
            is_custom=True,
        )
    else:
        updates: dict[str, object] = {}
        if global_path is not None:
            updates["global_path"] = global_path
        if project_path is not None:
            updates["project_path"] = project_path
        if enabled is not None:
            updates["enabled"] = enabled
        agent = existing.model_copy(update=updates)

    ctx.hub.agent_update(agent)
    click.echo(f"Saved agent {name}")


@agent_group.command(name="remove")
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def remove(ctx: HubContext, name: str) -> None:
    """Remove an agent."""
    if not ctx.hub.agent_remove(name):
        click.echo(f"No agent named {name}")
        return
    click.echo(f"Removed agent {name}")
