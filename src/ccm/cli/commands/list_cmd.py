"""List command for showing registered sources."""

import click

from ccm.cli.formatting import format_counts, format_origin
from ccm.cli.output import user_output
from ccm.context import CcmContext


def _list_sources_impl(ctx: CcmContext) -> None:
    sources = ctx.registry.list_sources()

    if len(sources) == 0:
        user_output("No sources registered")
        user_output("Use `ccm add <url>` to register one")
        return

    user_output(f"Registered {len(sources)} source(s):\n")
    for source in sources:
        line = f"  {source.alias:<30} {format_counts(source.assets):<16} {format_origin(source)}"
        user_output(line)


@click.command(name="list")
@click.pass_obj
def list_sources(ctx: CcmContext) -> None:
    """List registered sources."""
    _list_sources_impl(ctx)


@click.command(name="ls", hidden=True)
@click.pass_obj
def ls(ctx: CcmContext) -> None:
    """List registered sources (alias of 'list')."""
    _list_sources_impl(ctx)
