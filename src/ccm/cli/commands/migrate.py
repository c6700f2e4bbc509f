"""Migrate command for adopting stray assets into the local vault."""

import click

from ccm.cli.formatting import format_batch_failures
from ccm.cli.output import user_output
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.stray import StrayAsset, migrate_strays, scan_stray_assets


def _describe(stray: StrayAsset) -> str:
    if stray.is_external_symlink and stray.source_folder is None:
        return f"{stray.display_path} (external)"
    return stray.display_path


@click.command()
@click.argument("asset_paths", nargs=-1)
@click.option("--all", "select_all", is_flag=True, help="Migrate every stray asset")
@click.option("--yes", "-y", is_flag=True, help="Migrate without asking for confirmation")
@click.pass_obj
@cli_error_boundary
def migrate(ctx: CcmContext, asset_paths: tuple[str, ...], select_all: bool, yes: bool) -> None:
    """Adopt agents, skills and commands that ccm does not manage.

    Without arguments, lists the stray assets found in the Claude directories.
    Migrated assets move into the local vault, registered as source "local",
    and are linked back under their original names.

    Examples:

        ccm migrate agents/helper.md skills/pdf

        ccm migrate --all --yes
    """
    strays = scan_stray_assets(ctx.env, ctx.registry).all
    if not strays:
        user_output("No stray assets found")
        return

    if not asset_paths and not select_all:
        user_output(f"Stray assets ({len(strays)}):")
        for stray in strays:
            user_output(f"  {_describe(stray)}")
        user_output("\nMigrate with: ccm migrate <path>... or ccm migrate --all")
        return

    if select_all:
        selected = strays
    else:
        by_path = {stray.display_path.rstrip("/"): stray for stray in strays}
        wanted = list(dict.fromkeys(path.rstrip("/") for path in asset_paths))
        unknown = [path for path in wanted if path not in by_path]
        if unknown:
            for path in unknown:
                user_output(f"✗ Not a stray asset: {path}")
            user_output("Stray assets:")
            for stray in strays:
                user_output(f"  {_describe(stray)}")
            raise SystemExit(1)
        selected = [by_path[path] for path in wanted]

    user_output(f"Migrating {len(selected)} asset(s) to {ctx.env.vault_dir}")
    for stray in selected:
        user_output(f"  - {_describe(stray)}")

    if not yes and not click.confirm("Proceed?", default=True, err=True):
        user_output("Aborted")
        return

    migration = migrate_strays(ctx, selected)
    for outcome in migration.result.succeeded:
        user_output(f"✓ Migrated {outcome.key}")
    for line in format_batch_failures(migration.result):
        user_output(line)
    for folder in migration.released_folders:
        user_output(f"✓ Removed folder link {folder}")

    if migration.result.failed:
        raise SystemExit(1)
