"""Tests for doctor and doctor cure commands."""

from click.testing import CliRunner

from ccm.cli import cli
from ccm.context import CcmContext
from ccm.models.source import LocalSource


def test_doctor_all_healthy(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    cli_runner.invoke(cli, ["use", "kit", "reviewer", "deploy"], obj=ccm_ctx)

    result = cli_runner.invoke(cli, ["doctor"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert "All 2 link(s) healthy" in result.output


def test_doctor_reports_broken_links(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    cli_runner.invoke(cli, ["use", "kit", "reviewer", "deploy"], obj=ccm_ctx)
    (kit_source.local_path / "agents" / "reviewer.md").unlink()

    result = cli_runner.invoke(cli, ["doctor"], obj=ccm_ctx)

    assert result.exit_code == 1
    assert "Found 1 broken link(s)" in result.output
    assert "kit:agents/reviewer.md (missing_source: asset_missing)" in result.output
    assert "ccm doctor cure" in result.output


def test_doctor_cure_fixes_then_reports_nothing(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    cli_runner.invoke(cli, ["use", "kit", "reviewer", "deploy"], obj=ccm_ctx)
    (ccm_ctx.env.commands_dir / "kit-deploy.md").unlink()

    result = cli_runner.invoke(cli, ["doctor", "cure"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert "Fixed 1 broken link(s)" in result.output
    assert [s.asset_path for s in ccm_ctx.registry.list_selections()] == ["agents/reviewer.md"]

    second = cli_runner.invoke(cli, ["doctor", "cure"], obj=ccm_ctx)
    assert "Nothing to fix" in second.output
