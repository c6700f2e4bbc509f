"""Tests for mcp show, stage, unstage and sync commands."""

import json

from click.testing import CliRunner

from ccm.cli import cli
from ccm.context import CcmContext
from ccm.models.source import LocalSource


def test_mcp_stage_all_servers_of_bundle(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    result = cli_runner.invoke(cli, ["mcp", "stage", "kit", "mcp.json"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert "Staged 2 MCP server(s)" in result.output
    assert ccm_ctx.registry.list_staged_entries_for("kit", "mcp.json") == ["github", "fs"]


def test_mcp_stage_unknown_server(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    result = cli_runner.invoke(cli, ["mcp", "stage", "kit", "mcp.json", "fs", "nope"], obj=ccm_ctx)

    assert result.exit_code == 1
    assert "No server 'nope' in mcp.json" in result.output
    assert ccm_ctx.registry.list_staged_entries_for("kit", "mcp.json") == ["fs"]


def test_mcp_stage_rejects_non_bundle(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    result = cli_runner.invoke(cli, ["mcp", "stage", "kit", "agents/reviewer.md"], obj=ccm_ctx)

    assert result.exit_code == 1
    assert "Asset not found in kit: agents/reviewer.md" in result.output


def test_mcp_unstage(cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource) -> None:
    cli_runner.invoke(cli, ["mcp", "stage", "kit", "mcp.json"], obj=ccm_ctx)

    result = cli_runner.invoke(cli, ["mcp", "unstage", "kit", "mcp.json", "github"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert ccm_ctx.registry.list_staged_entries_for("kit", "mcp.json") == ["fs"]


def test_mcp_show_preview(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    cli_runner.invoke(cli, ["mcp", "stage", "kit", "mcp.json", "github"], obj=ccm_ctx)

    result = cli_runner.invoke(cli, ["mcp", "show"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert "No MCP servers configured" in result.output
    assert "+ github (kit:mcp.json)" in result.output


def test_mcp_show_json_prints_merged_config(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    cli_runner.invoke(cli, ["mcp", "stage", "kit", "mcp.json", "fs"], obj=ccm_ctx)

    result = cli_runner.invoke(cli, ["mcp", "show", "--json"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"mcpServers": {"fs": {"command": "fs-mcp"}}}


def test_mcp_sync_writes_config(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    cli_runner.invoke(cli, ["mcp", "stage", "kit", "mcp.json"], obj=ccm_ctx)

    result = cli_runner.invoke(cli, ["mcp", "sync", "--yes"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert "Wrote 2 server(s)" in result.output
    written = json.loads(ccm_ctx.env.mcp_config_path.read_text(encoding="utf-8"))
    assert set(written["mcpServers"]) == {"github", "fs"}
    assert ccm_ctx.registry.list_staged_entries() == []


def test_mcp_sync_aborts_when_declined(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    cli_runner.invoke(cli, ["mcp", "stage", "kit", "mcp.json"], obj=ccm_ctx)

    result = cli_runner.invoke(cli, ["mcp", "sync"], obj=ccm_ctx, input="n\n")

    assert result.exit_code == 0, result.output
    assert "Aborted" in result.output
    assert not ccm_ctx.env.mcp_config_path.exists()
    assert len(ccm_ctx.registry.list_staged_entries()) == 2


def test_mcp_sync_nothing_staged(cli_runner: CliRunner, ccm_ctx: CcmContext) -> None:
    result = cli_runner.invoke(cli, ["mcp", "sync", "--yes"], obj=ccm_ctx)

    assert result.exit_code == 0
    assert "Nothing staged" in result.output


def test_mcp_sync_lists_skipped_servers_apart(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    ccm_ctx.stager.stage("kit", "mcp.json", ["github", "vanished"])

    result = cli_runner.invoke(cli, ["mcp", "sync", "--yes"], obj=ccm_ctx)

    assert result.exit_code == 0, result.output
    assert "Writing 1 staged server(s)" in result.output
    assert "! vanished (kit:mcp.json)" in result.output
    assert "+ vanished" not in result.output
    on_disk = json.loads(ccm_ctx.env.mcp_config_path.read_text(encoding="utf-8"))
    assert on_disk == {"mcpServers": {"github": {"command": "gh-mcp"}}}


def test_mcp_sync_with_only_unresolved_servers_writes_nothing(
    cli_runner: CliRunner, ccm_ctx: CcmContext, kit_source: LocalSource
) -> None:
    ccm_ctx.stager.stage("gone", "mcp.json", ["y"])

    result = cli_runner.invoke(cli, ["mcp", "sync", "--yes"], obj=ccm_ctx)

    assert result.exit_code == 1
    assert "! y (gone:mcp.json)" in result.output
    assert not ccm_ctx.env.mcp_config_path.exists()
    assert ccm_ctx.registry.list_staged_entries_for("gone", "mcp.json") == ["y"]
