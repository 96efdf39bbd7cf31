"""Error boundary for CLI commands.

Expected failures are printed as a single ``Error: ...`` line on stderr and
exit with status 1. Anything else propagates with its stack trace.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import click

from skills_hub.errors import HubError

HANDLED_ERRORS: tuple[type[Exception], ...] = (
    HubError,
    FileExistsError,
    FileNotFoundError,
    PermissionError,
    ValueError,
)

T = TypeVar("T", bound=Callable[..., Any])


def cli_error_boundary(func: T) -> T:
    """Turn HubError and the builtin errors raised by file and input handling into exit 1.

    Example:
        @click.command()
        @cli_error_boundary
        def my_command():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HANDLED_ERRORS as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
