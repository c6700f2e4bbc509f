"""Show command for inspecting one source."""

import click

from ccm.cli.formatting import format_counts, format_origin, group_by_type
from ccm.cli.output import user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.errors import SourceNotFoundError
from ccm.io.frontmatter import read_frontmatter


@click.command()
@click.argument("alias")
@click.pass_obj
@cli_error_boundary
def show(ctx: CcmContext, alias: str) -> None:
    """Show a source's detected assets and which of them are in use.

    Linked assets are marked with *, staged MCP servers with +.
    """
    source = ctx.registry.get_source(alias)
    if source is None:
        raise SourceNotFoundError(alias)

    linked = {s.asset_path for s in ctx.registry.list_selections_for_source(alias)}

    user_output(f"{source.alias} ({format_origin(source)})")
    user_output(f"  Path: {source.local_path}")
    if source.updated_at:
        user_output(f"  Updated: {source.updated_at}")
    user_output(f"  Assets: {format_counts(source.assets)}")

    for plural, assets in group_by_type(source.assets).items():
        user_output(f"\n  {plural}:")
        for asset in assets:
            if asset.type == "mcp":
                staged = set(ctx.registry.list_staged_entries_for(alias, asset.path))
                user_output(f"      {asset.path}")
                for server in ctx.stager.list_server_names(source.local_path / asset.path):
                    marker = "+" if server in staged else " "
                    user_output(f"        {marker} {server}")
                continue
            marker = "*" if asset.path in linked else " "
            description = read_frontmatter(source.local_path / asset.path).get("description")
            if isinstance(description, str) and description:
                user_output(f"    {marker} {asset.path}  {description}")
            else:
                user_output(f"    {marker} {asset.path}")
