"""Use command for linking assets and staging MCP servers."""

import click

from ccm.cli.formatting import format_batch_failures
from ccm.cli.output import user_output
from ccm.cli.resolve import resolve_assets
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.errors import InvalidInputError, SourceNotFoundError
from ccm.models.asset import ASSET_TYPES


@click.command()
@click.argument("alias")
@click.argument("selectors", nargs=-1)
@click.option("--all", "select_all", is_flag=True, help="Use every asset of the source")
@click.option(
    "--type",
    "asset_type",
    type=click.Choice(list(ASSET_TYPES)),
    help="Restrict selection to one asset type",
)
@click.option(
    "--server",
    "servers",
    multiple=True,
    help="Stage only these servers from selected MCP bundles (repeatable)",
)
@click.pass_obj
@cli_error_boundary
def use(
    ctx: CcmContext,
    alias: str,
    selectors: tuple[str, ...],
    select_all: bool,
    asset_type: str | None,
    servers: tuple[str, ...],
) -> None:
    """Link assets of a source into the Claude directory.

    SELECTORS are asset paths or names as shown by `ccm show`. Selected MCP
    bundles are not linked; their servers are staged for `ccm mcp sync`.

    Examples:

        ccm use ak agents/reviewer.md

        ccm use ak --all --type skill

        ccm use ak .mcp.json --server github
    """
    source = ctx.registry.get_source(alias)
    if source is None:
        raise SourceNotFoundError(alias)

    if not selectors and not select_all:
        raise InvalidInputError("Name assets to use or pass --all")

    resolved = resolve_assets(source, selectors, select_all=select_all, asset_type=asset_type)
    for selector in resolved.unknown:
        user_output(f"✗ No asset matching '{selector}' in {alias}")

    linkable = [a for a in resolved.assets if a.type != "mcp"]
    bundles = [a for a in resolved.assets if a.type == "mcp"]

    failed = bool(resolved.unknown)

    if linkable:
        result = ctx.links.link_many(alias, linkable)
        if result.succeeded:
            user_output(f"✓ Linked {len(result.succeeded)} asset(s)")
        for line in format_batch_failures(result):
            user_output(line)
        failed = failed or bool(result.failed)

    for bundle in bundles:
        available = ctx.stager.list_server_names(source.local_path / bundle.path)
        names = [name for name in available if not servers or name in servers]
        if not names:
            user_output(f"✗ No servers to stage from {bundle.path}")
            failed = True
            continue
        result = ctx.stager.stage(alias, bundle.path, names)
        user_output(f"✓ Staged {len(result.succeeded)} MCP server(s) from {bundle.path}")
        for line in format_batch_failures(result):
            user_output(line)
        failed = failed or bool(result.failed)

    if bundles:
        user_output("Run `ccm mcp sync` to write staged MCP servers")

    if not resolved.assets:
        user_output("Nothing selected")

    if failed:
        raise SystemExit(1)
