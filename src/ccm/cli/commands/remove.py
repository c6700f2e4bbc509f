"""Remove command for unregistering sources."""

import click

from ccm.cli.output import user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.sources import remove_source


def _remove_impl(ctx: CcmContext, alias: str) -> None:
    result = remove_source(ctx, alias)
    if result is None:
        user_output(f"Error: Source '{alias}' not found")
        raise SystemExit(1)

    user_output(f"✓ Removed {alias}")
    if result.unlinked_count > 0:
        user_output(f"  Unlinked {result.unlinked_count} asset(s)")


@click.command()
@click.argument("alias")
@click.pass_obj
@cli_error_boundary
def remove(ctx: CcmContext, alias: str) -> None:
    """Remove a source, its links and staged MCP servers.

    The cloned directory of a GitHub source is deleted; local directories are kept.
    """
    _remove_impl(ctx, alias)


@click.command(name="rm", hidden=True)
@click.argument("alias")
@click.pass_obj
@cli_error_boundary
def rm(ctx: CcmContext, alias: str) -> None:
    """Remove a source (alias of 'remove')."""
    _remove_impl(ctx, alias)
