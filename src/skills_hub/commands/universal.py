"""Universal provider commands: one endpoint and key fanned out to every tool."""

import click

from skills_hub.cli.output import new_table, print_table
from skills_hub.context import HubContext
from skills_hub.error_boundary import cli_error_boundary
from skills_hub.errors import ConfigValidationError
from skills_hub.models.app_type import AppType
from skills_hub.models.provider import (
    ModelConfig,
    UniversalProviderApps,
    UniversalProviderModels,
)
from skills_hub.operations.masking import mask_api_key


def _apps_from_flags(disabled: tuple[str, ...]) -> UniversalProviderApps | None:
    if not disabled:
        return None
    names = {AppType.parse(raw).value for raw in disabled}
    return UniversalProviderApps(
        claude="claude" not in names,
        codex="codex" not in names,
        gemini="gemini" not in names,
    )


def _models_from_flags(pairs: tuple[str, ...]) -> UniversalProviderModels | None:
    """Parse repeated ``APP=MODEL`` options."""
    if not pairs:
        return None
    models: dict[str, ModelConfig] = {}
    for pair in pairs:
        app, sep, model = pair.partition("=")
        if not sep or not model.strip():
            raise ConfigValidationError(f"Expected APP=MODEL, got: {pair}")
        models[AppType.parse(app.strip()).value] = ModelConfig(model=model.strip())
    return UniversalProviderModels(**models)


@click.group(name="universal")
def universal_group() -> None:
    """Manage universal providers shared across tools."""


@universal_group.command(name="list")
@click.pass_obj
@cli_error_boundary
def list_universal(ctx: HubContext) -> None:
    """List universal providers."""
    records = ctx.hub.universal_provider_list()
    if not records:
        click.echo("No universal providers")
        return

    table = new_table("id", "name", "base url", "api key", "apps")
    for record in records:
        apps = ",".join(app.value for app in AppType if record.apps.is_enabled(app))
        table.add_row(record.id, record.name, record.base_url, mask_api_key(record.api_key), apps)
    print_table(table)


@universal_group.command(name="add")
@click.option("--name", required=True, help="Display name")
@click.option("--base-url", required=True, help="API endpoint")
@click.option("--api-key", required=True, help="API key")
@click.option("--website-url", default=None, help="Provider website")
@click.option("--notes", default=None, help="Free-form notes")
@click.option("--disable-app", "disabled", multiple=True, help="Tool to leave out (repeatable)")
@click.option("--model", "models", multiple=True, help="APP=MODEL override (repeatable)")
@click.pass_obj
@cli_error_boundary
def add(
    ctx: HubContext,
    name: str,
    base_url: str,
    api_key: str,
    website_url: str | None,
    notes: str | None,
    disabled: tuple[str, ...],
    models: tuple[str, ...],
) -> None:
    """Add a universal provider."""
    record = ctx.hub.universal_provider_add(
        name,
        base_url,
        api_key,
        website_url=website_url,
        notes=notes,
        apps=_apps_from_flags(disabled),
        models=_models_from_flags(models),
    )
    click.echo(f"Added {record.id}")


@universal_group.command(name="update")
@click.argument("universal_id")
@click.option("--name", default=None)
@click.option("--base-url", default=None)
@click.option("--api-key", default=None)
@click.option("--website-url", default=None)
@click.option("--notes", default=None)
@click.option("--disable-app", "disabled", multiple=True, help="Tool to leave out (repeatable)")
@click.option("--model", "models", multiple=True, help="APP=MODEL override (repeatable)")
@click.pass_obj
@cli_error_boundary
def update(
    ctx: HubContext,
    universal_id: str,
    name: str | None,
    base_url: str | None,
    api_key: str | None,
    website_url: str | None,
    notes: str | None,
    disabled: tuple[str, ...],
    models: tuple[str, ...],
) -> None:
    """Update a universal provider. Run ``apply`` to push changes to the tools."""
    record = ctx.hub.universal_provider_update(
        universal_id,
        name=name,
        base_url=base_url,
        api_key=api_key,
        website_url=website_url,
        notes=notes,
        apps=_apps_from_flags(disabled),
        models=_models_from_flags(models),
    )
    click.echo(f"Updated {record.id}")


@universal_group.command(name="delete")
@click.argument("universal_id")
@click.pass_obj
@cli_error_boundary
def delete(ctx: HubContext, universal_id: str) -> None:
    """Delete a universal provider. Per-tool providers created from it are kept."""
    ctx.hub.universal_provider_delete(universal_id)
    click.echo(f"Deleted {universal_id}")


@universal_group.command(name="apply")
@click.argument("universal_id")
@click.pass_obj
@cli_error_boundary
def apply(ctx: HubContext, universal_id: str) -> None:
    """Create or refresh the per-tool providers of a universal provider."""
    records = ctx.hub.universal_provider_apply(universal_id)
    for record in records:
        click.echo(f"{record.app_type.value}: {record.id}")
