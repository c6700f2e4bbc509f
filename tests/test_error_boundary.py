"""Tests for the CLI error boundary."""

import click
import pytest
from click.testing import CliRunner

from ccm.cli import cli
from ccm.context import CcmContext
from ccm.error_boundary import cli_error_boundary
from ccm.errors import SourceNotFoundError


@click.command()
@cli_error_boundary
def failing() -> None:
    raise SourceNotFoundError("acme.kit")


@click.command()
@cli_error_boundary
def crashing() -> None:
    raise KeyError("unexpected")


def test_well_known_error_prints_message_and_exits_1() -> None:
    result = CliRunner().invoke(failing, [])

    assert result.exit_code == 1
    assert "Error: Source not found: acme.kit" in result.output


def test_unexpected_error_propagates() -> None:
    result = CliRunner().invoke(crashing, [])

    assert isinstance(result.exception, KeyError)


def test_debug_context_reraises(tmp_path) -> None:
    ctx = CcmContext.for_test(tmp_path, debug=True)

    result = CliRunner().invoke(cli, ["show", "missing"], obj=ctx)

    assert isinstance(result.exception, SourceNotFoundError)


@pytest.mark.parametrize("args", [["--help"], []])
def test_help_lists_commands(args: list[str], ccm_ctx: CcmContext) -> None:
    result = CliRunner().invoke(cli, args, obj=ccm_ctx)

    assert result.exit_code == 0
    assert "add-local" in result.output
    assert "doctor" in result.output
    assert "mcp" in result.output
