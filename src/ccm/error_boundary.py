"""Error boundary handling for CLI commands.

This module provides decorators to catch well-known exceptions at CLI entry points
and display clean error messages without stack traces.
"""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import click

from ccm.errors import CcmError

_WELL_KNOWN_ERRORS: tuple[type[Exception], ...] = (
    CcmError,
    FileExistsError,
    FileNotFoundError,
    PermissionError,
    ValueError,
    RuntimeError,
)


def _debug_enabled() -> bool:
    ctx = click.get_current_context(silent=True)
    if ctx is None:
        return False
    obj = ctx.find_root().obj
    return bool(getattr(obj, "debug", False))


T = TypeVar("T", bound=Callable[..., Any])


def cli_error_boundary(func: T) -> T:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches ccm errors (not found, invalid input, conflicts), file conflicts,
    missing files, permission problems, invalid values and failed subprocesses.
    Under --debug the exception propagates with its full stack trace.

    All other exceptions bubble up normally with full stack traces.

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
        except _WELL_KNOWN_ERRORS as e:
            if _debug_enabled():
                raise
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]
