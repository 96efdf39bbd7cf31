import logging

import click

from skills_hub.error_boundary import cli_error_boundary
from skills_hub.version import __version__

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

# Track whether commands are registered
_commands_registered = False


class LazyGroup(click.Group):
    """Click Group that lazily loads commands."""

    def list_commands(self, ctx):
        """List available commands, registering them if needed."""
        if not _commands_registered:
            _register_commands()
        return super().list_commands(ctx)

    def get_command(self, ctx, cmd_name):
        """Get a command by name, registering if needed."""
        if not _commands_registered:
            _register_commands()
        return super().get_command(ctx, cmd_name)


@click.command(cls=LazyGroup, invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Switch AI CLI providers and apply skill kits."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        return

    # Tests inject a prepared HubContext through obj
    if ctx.obj is None:
        from skills_hub.context import create_context

        ctx.obj = create_context(debug=debug)


def _register_commands() -> None:
    """Register all commands with the CLI group."""
    global _commands_registered

    if _commands_registered:
        return

    from skills_hub.commands.agent import agent_group
    from skills_hub.commands.config import config_group
    from skills_hub.commands.kit import kit_group
    from skills_hub.commands.project import project_group
    from skills_hub.commands.provider import provider_group
    from skills_hub.commands.skill import skill_group
    from skills_hub.commands.snapshot import snapshot_group
    from skills_hub.commands.universal import universal_group

    cli.add_command(agent_group)
    cli.add_command(config_group)
    cli.add_command(kit_group)
    cli.add_command(project_group)
    cli.add_command(provider_group)
    cli.add_command(skill_group)
    cli.add_command(snapshot_group)
    cli.add_command(universal_group)

    _commands_registered = True


def main() -> None:
    """Entry point with error boundary."""
    cli_error_boundary(cli)()


if __name__ == "__main__":
    main()
