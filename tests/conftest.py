"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from ccm.context import CcmContext
from ccm.integrations.git.fake import write_tree
from ccm.models.source import LocalSource
from ccm.sources import register_local_source

KIT_FILES = {
    "agents/reviewer.md": (
        "---\nname: reviewer\ndescription: Reviews pull requests\n---\nReview code.\n"
    ),
    "skills/pdf/SKILL.md": "---\nname: pdf\n---\nWork with PDFs.\n",
    "commands/deploy.md": "Deploy the app.\n",
    "mcp.json": '{"mcpServers": {"github": {"command": "gh-mcp"}, "fs": {"command": "fs-mcp"}}}',
    "README.md": "Not an asset.\n",
}


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def ccm_ctx(tmp_path: Path) -> CcmContext:
    """Create a CcmContext rooted at a temporary home with an empty FakeGit."""
    return CcmContext.for_test(tmp_path / "home")


@pytest.fixture
def kit_dir(tmp_path: Path) -> Path:
    """Create a local directory holding one asset of every type."""
    root = tmp_path / "kit"
    root.mkdir()
    write_tree(root, KIT_FILES)
    return root


@pytest.fixture
def kit_source(ccm_ctx: CcmContext, kit_dir: Path) -> LocalSource:
    """Register kit_dir as a local source (alias "kit")."""
    return register_local_source(ccm_ctx, kit_dir)
