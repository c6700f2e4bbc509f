"""Status command for showing what is in use."""

import click

from ccm.cli.output import user_output
from ccm.context import CcmContext


@click.command()
@click.pass_obj
def status(ctx: CcmContext) -> None:
    """Show linked assets and staged MCP servers."""
    selections = ctx.registry.list_selections()
    staged = ctx.registry.list_staged_entries()

    if not selections and not staged:
        user_output("Nothing in use")
        return

    if selections:
        user_output(f"Linked ({len(selections)}):")
        for selection in selections:
            user_output(f"  [{selection.type}] {selection.repo_alias}:{selection.asset_path}")
            user_output(f"    → {selection.linked_path}")

    if staged:
        if selections:
            user_output("")
        user_output(f"Staged MCP servers ({len(staged)}):")
        for entry in staged:
            user_output(f"  {entry.server_name} ({entry.repo_alias}:{entry.asset_path})")
        user_output("Run `ccm mcp sync` to write them")
