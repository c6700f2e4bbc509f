"""Add commands for registering sources."""

from pathlib import Path

import click

from ccm.cli.formatting import format_counts
from ccm.cli.output import user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.sources import clone_source, register_local_source


@click.command()
@click.argument("url")
@click.pass_obj
@cli_error_boundary
def add(ctx: CcmContext, url: str) -> None:
    """Clone a GitHub repository and register it as a source.

    URL may be a full GitHub URL or owner/repo shorthand.

    Examples:

        ccm add acmefoo/claude-kit

        ccm add https://github.com/acmefoo/claude-kit
    """
    user_output(f"Cloning {url}...")
    source = clone_source(ctx, url)

    user_output(f"✓ Cloned to {source.local_path}")
    user_output(f"✓ Detected: {format_counts(source.assets)}")
    user_output(f'✓ Registered as "{source.alias}"')


@click.command(name="add-local")
@click.argument("directory", type=click.Path(path_type=Path))
@click.pass_obj
@cli_error_boundary
def add_local(ctx: CcmContext, directory: Path) -> None:
    """Register a local directory as a source without copying it."""
    source = register_local_source(ctx, directory)

    user_output(f"✓ Detected: {format_counts(source.assets)}")
    user_output(f'✓ Registered as "{source.alias}"')
