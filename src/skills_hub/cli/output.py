"""Output helpers shared by the command modules.

Records and results go to stdout as JSON; tables are rendered with rich.
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

import click
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from skills_hub.errors import ConfigValidationError
from skills_hub.operations.skill_sync import SyncChange, summarize_changes


def _serialize_for_json(obj: Any) -> Any:
    """Recursively convert models, dataclasses and enums to JSON-ready values."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if is_dataclass(obj) and not isinstance(obj, type):
        return _serialize_for_json(asdict(obj))
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, dict):
        return {
            str(_serialize_for_json(key)): _serialize_for_json(value)
            for key, value in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_serialize_for_json(item) for item in obj]
    return obj


def emit_json(data: Any) -> None:
    """Print data as indented JSON on stdout."""
    click.echo(json.dumps(_serialize_for_json(data), indent=2))


def print_table(table: Table) -> None:
    console = Console(width=200)
    console.print(table)


def new_table(*columns: str) -> Table:
    table = Table(show_header=True, header_style="bold")
    for index, column in enumerate(columns):
        if index == 0:
            table.add_column(column, style="cyan", no_wrap=True)
        else:
            table.add_column(column, no_wrap=True)
    return table


def parse_json_object(raw: str, label: str) -> dict[str, Any]:
    """Parse a JSON object passed on the command line.

    Raises:
        ConfigValidationError: If raw is not valid JSON or not an object
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid JSON for {label}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigValidationError(f"{label} must be a JSON object")
    return data


def print_dry_run(changes: list[SyncChange], warnings: list[str] | None = None) -> None:
    """Print planned changes, warnings and a one-line summary."""
    for change in changes:
        click.echo(f"  {change.type.value:<7} {change.dest}  ({change.reason})")
    for warning in warnings or []:
        click.echo(f"  warning {warning}")
    summary = summarize_changes(changes)
    click.echo(
        f"Dry run summary: total={summary.total} add={summary.add} update={summary.update} "
        f"delete={summary.delete} link={summary.link}"
    )
