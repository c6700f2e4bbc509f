"""Doctor commands for diagnosing and repairing links."""

import click

from ccm.cli.output import user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary


@click.group(name="doctor", invoke_without_command=True)
@click.pass_context
def doctor_group(click_ctx: click.Context) -> None:
    """Check that every linked asset still resolves."""
    if click_ctx.invoked_subcommand is not None:
        return

    ctx: CcmContext = click_ctx.obj
    diagnosis = ctx.links.diagnose()

    if not diagnosis.broken:
        user_output(f"✓ All {len(diagnosis.healthy)} link(s) healthy")
        return

    user_output(f"Found {len(diagnosis.broken)} broken link(s):")
    for health in diagnosis.broken:
        selection = health.selection
        label = f"{selection.repo_alias}:{selection.asset_path}"
        user_output(f"  ✗ {label} ({health.issue}: {health.reason})")
        user_output(f"    {selection.linked_path}")
    user_output("\nRun `ccm doctor cure` to remove them")
    raise SystemExit(1)


@doctor_group.command(name="cure")
@click.pass_obj
@cli_error_boundary
def cure(ctx: CcmContext) -> None:
    """Remove broken links and forget their selections."""
    result = ctx.links.cure()

    if result.fixed == 0 and not result.errors:
        user_output("✓ Nothing to fix")
        return

    user_output(f"✓ Fixed {result.fixed} broken link(s)")
    for error in result.errors:
        user_output(f"  ✗ {error}")

    if result.errors:
        raise SystemExit(1)
