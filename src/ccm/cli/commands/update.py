"""Update command for refreshing sources."""

import click

from ccm.cli.output import user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.sources import refresh_active_sources, refresh_all_sources, refresh_source


@click.command()
@click.argument("alias", required=False)
@click.option("--all", "update_all", is_flag=True, help="Update every source, not only active ones")
@click.pass_obj
@cli_error_boundary
def update(ctx: CcmContext, alias: str | None, update_all: bool) -> None:
    """Pull the latest files for sources and re-detect their assets.

    With ALIAS, update that source. Without it, update sources that have linked
    assets or staged MCP servers, or every source with --all.
    """
    if alias is not None and update_all:
        raise click.UsageError("Cannot combine ALIAS with --all")

    if alias is not None:
        source = refresh_source(ctx, alias)
        user_output(f"✓ Updated {source.alias} ({len(source.assets)} asset(s))")
        return

    result = refresh_all_sources(ctx) if update_all else refresh_active_sources(ctx)
    if len(result.outcomes) == 0:
        user_output("No sources to update")
        return

    for outcome in result.succeeded:
        user_output(f"✓ Updated {outcome.key}")
    for outcome in result.failed:
        user_output(f"✗ {outcome.key}: {outcome.error}")

    if result.failed:
        raise SystemExit(1)
