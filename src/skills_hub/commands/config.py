"""Config commands for ~/.skills-hub/config.toml."""

import click

from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary
from skills_hub.global_config import CONFIG_KEYS


@click.group(name="config")
def config_group() -> None:
    """Show and change skills-hub settings."""


@config_group.command(name="show")
@click.pass_obj
@cli_error_boundary
def show(ctx: HubContext) -> None:
    """Print settings and the hub location."""
    config = ctx.global_config
    click.echo(f"state_path={config.state_path}")
    click.echo(f"lock_timeout_seconds={config.lock_timeout_seconds}")
    click.echo(f"default_sync_mode={config.default_sync_mode.value}")
    click.echo(f"snapshot_retention={config.snapshot_retention}")
    click.echo(f"hub_path={ctx.hub.config_get().hub_path}")


@config_group.command(name="set")
@click.argument("key", type=click.Choice(list(CONFIG_KEYS)))
@click.argument("value")
@click.pass_obj
@cli_error_boundary
def set_value(ctx: HubContext, key: str, value: str) -> None:
    """Set KEY to VALUE in config.toml."""
    updated = ctx.global_config.with_value(key, value)
    ctx.global_config_ops.save(updated)
    click.echo(f"Set {key}={value}")
