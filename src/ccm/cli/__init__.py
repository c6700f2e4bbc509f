import click

from ccm.cli.commands import (
    add,
    doctor,
    list_cmd,
    mcp,
    migrate,
    remove,
    show,
    status,
    unuse,
    update,
    use,
)
from ccm.context import CcmContext, create_context
from ccm.error_boundary import cli_error_boundary
from ccm.version import __version__

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(invoke_without_command=True, context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Show full stack traces and debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Manage Claude Code agents, skills, commands and MCP servers from Git repositories."""
    # Tests inject a prepared CcmContext through CliRunner.invoke(obj=...)
    if not isinstance(ctx.obj, CcmContext):
        ctx.obj = create_context(debug=debug)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register top-level commands
cli.add_command(add.add)
cli.add_command(add.add_local)
cli.add_command(list_cmd.list_sources)
cli.add_command(list_cmd.ls)
cli.add_command(show.show)
cli.add_command(remove.remove)
cli.add_command(remove.rm)
cli.add_command(update.update)
cli.add_command(use.use)
cli.add_command(unuse.unuse)
cli.add_command(status.status)
cli.add_command(migrate.migrate)

# Register command groups
cli.add_command(doctor.doctor_group)
cli.add_command(mcp.mcp_group)


def main() -> None:
    """Entry point with error boundary."""
    cli_error_boundary(cli)()


if __name__ == "__main__":
    main()
