"""Unuse command for removing links and unstaging MCP servers."""

import click

from ccm.cli.formatting import format_batch_failures
from ccm.cli.output import user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.errors import InvalidInputError, SourceNotFoundError


@click.command()
@click.argument("alias")
@click.argument("asset_paths", nargs=-1)
@click.option(
    "--all", "select_all", is_flag=True, help="Unlink and unstage everything from the source"
)
@click.pass_obj
@cli_error_boundary
def unuse(ctx: CcmContext, alias: str, asset_paths: tuple[str, ...], select_all: bool) -> None:
    """Remove links of a source's assets and unstage its MCP servers."""
    source = ctx.registry.get_source(alias)
    if source is None:
        raise SourceNotFoundError(alias)

    if not asset_paths and not select_all:
        raise InvalidInputError("Name assets to stop using or pass --all")

    if select_all:
        linked = [s.asset_path for s in ctx.registry.list_selections_for_source(alias)]
        staged = ctx.registry.list_staged_entries()
        bundles = sorted({e.asset_path for e in staged if e.repo_alias == alias})
    else:
        bundle_paths = {a.path for a in source.assets_of_type("mcp")}
        linked = [p for p in asset_paths if p not in bundle_paths]
        bundles = [p for p in asset_paths if p in bundle_paths]

    failed = False

    if linked:
        result = ctx.links.unlink_many(alias, linked)
        if result.succeeded:
            user_output(f"✓ Unlinked {len(result.succeeded)} asset(s)")
        for line in format_batch_failures(result):
            user_output(line)
        failed = bool(result.failed)

    for bundle in bundles:
        names = ctx.registry.list_staged_entries_for(alias, bundle)
        if not names:
            user_output(f"✗ {bundle}: nothing staged")
            failed = True
            continue
        result = ctx.stager.unstage(alias, bundle, names)
        if result.succeeded:
            user_output(f"✓ Unstaged {len(result.succeeded)} MCP server(s) from {bundle}")
        for line in format_batch_failures(result):
            user_output(line)
        failed = failed or bool(result.failed)

    if not linked and not bundles:
        user_output("Nothing to remove")

    if failed:
        raise SystemExit(1)
