"""Output helpers for CLI commands with clear intent.

user_output carries human-readable progress and results to stderr;
machine_output carries data meant for pipes (e.g. merged JSON) to stdout.
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, nl=nl)
