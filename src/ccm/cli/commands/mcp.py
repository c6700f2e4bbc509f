"""MCP commands for staging servers and writing the merged config."""

import json

import click

from ccm.cli.formatting import format_batch_failures
from ccm.cli.output import machine_output, user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.errors import AssetNotFoundError, SourceNotFoundError
from ccm.models.source import Source
from ccm.staging import McpPreview


def _print_unresolved(preview: McpPreview) -> None:
    if not preview.unresolved:
        return
    user_output(f"Not found, will be skipped ({len(preview.unresolved)}):")
    for addition in preview.unresolved:
        user_output(f"  ! {addition.name} ({addition.source_alias}:{addition.bundle_filename})")


def _require_bundle(ctx: CcmContext, alias: str, bundle_path: str) -> Source:
    source = ctx.registry.get_source(alias)
    if source is None:
        raise SourceNotFoundError(alias)
    asset = source.find_asset(bundle_path)
    if asset is None or asset.type != "mcp":
        raise AssetNotFoundError(alias, bundle_path)
    return source


@click.group(name="mcp")
def mcp_group() -> None:
    """Stage MCP servers and write them to the Claude MCP config."""


@mcp_group.command(name="show")
@click.option(
    "--json", "as_json", is_flag=True, help="Print the merged config that sync would write"
)
@click.pass_obj
@cli_error_boundary
def show_cmd(ctx: CcmContext, as_json: bool) -> None:
    """Preview staged servers and the servers already configured."""
    if as_json:
        machine_output(json.dumps(ctx.stager.build_merged_config(), indent=2))
        return

    preview = ctx.stager.preview()

    if preview.existing:
        user_output(f"Currently configured ({len(preview.existing)}):")
        for name in preview.existing:
            user_output(f"  {name}")
    else:
        user_output("No MCP servers configured")

    if not preview.additions and not preview.unresolved:
        user_output("\nNothing staged")
        return

    user_output(f"\nStaged ({len(preview.additions)}):")
    for addition in preview.additions:
        user_output(f"  + {addition.name} ({addition.source_alias}:{addition.bundle_filename})")
    _print_unresolved(preview)


@mcp_group.command(name="stage")
@click.argument("alias")
@click.argument("bundle_path")
@click.argument("servers", nargs=-1)
@click.pass_obj
@cli_error_boundary
def stage_cmd(ctx: CcmContext, alias: str, bundle_path: str, servers: tuple[str, ...]) -> None:
    """Stage SERVERS (default: all) from an MCP bundle of a source."""
    source = _require_bundle(ctx, alias, bundle_path)
    available = ctx.stager.list_server_names(source.local_path / bundle_path)

    unknown = [name for name in servers if name not in available]
    for name in unknown:
        user_output(f"✗ No server '{name}' in {bundle_path}")

    names = [name for name in servers if name in available] if servers else available
    result = ctx.stager.stage(alias, bundle_path, names)
    user_output(f"✓ Staged {len(result.succeeded)} MCP server(s)")
    for line in format_batch_failures(result):
        user_output(line)

    if unknown or result.failed:
        raise SystemExit(1)


@mcp_group.command(name="unstage")
@click.argument("alias")
@click.argument("bundle_path")
@click.argument("servers", nargs=-1)
@click.pass_obj
@cli_error_boundary
def unstage_cmd(ctx: CcmContext, alias: str, bundle_path: str, servers: tuple[str, ...]) -> None:
    """Unstage SERVERS (default: all staged) from an MCP bundle of a source."""
    names = list(servers) if servers else ctx.registry.list_staged_entries_for(alias, bundle_path)
    result = ctx.stager.unstage(alias, bundle_path, names)

    user_output(f"✓ Unstaged {len(result.succeeded)} MCP server(s)")
    for line in format_batch_failures(result):
        user_output(line)

    if result.failed:
        raise SystemExit(1)


@mcp_group.command(name="sync")
@click.option("--yes", "-y", is_flag=True, help="Write without asking for confirmation")
@click.pass_obj
@cli_error_boundary
def sync_cmd(ctx: CcmContext, yes: bool) -> None:
    """Write staged servers to the MCP config and clear the staging area.

    The MCP config file is replaced by the merged staged servers.
    """
    preview = ctx.stager.preview()
    if not preview.additions and not preview.unresolved:
        user_output("Nothing staged")
        return

    _print_unresolved(preview)
    if not preview.additions:
        user_output("Nothing to write; unstage the servers above to clear them")
        raise SystemExit(1)

    user_output(f"Writing {len(preview.additions)} staged server(s) to {ctx.env.mcp_config_path}")
    for addition in preview.additions:
        user_output(f"  + {addition.name} ({addition.source_alias}:{addition.bundle_filename})")
    staged_names = {a.name for a in preview.additions}
    replaced = [name for name in preview.existing if name not in staged_names]
    if replaced:
        user_output(f"  No longer configured: {', '.join(replaced)}")

    if not yes and not click.confirm("Proceed?", default=True, err=True):
        user_output("Aborted")
        return

    merged = ctx.stager.sync()
    user_output(f"✓ Wrote {len(merged['mcpServers'])} server(s)")
