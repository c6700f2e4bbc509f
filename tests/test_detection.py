"""Tests for asset detection."""

import os
from pathlib import Path

from ccm.detection import detect_assets, list_server_names
from ccm.integrations.git.fake import write_tree


def _paths(assets) -> list[str]:
    return [asset.path for asset in assets]


def test_detects_each_asset_type(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            "agents/reviewer.md": "Review.\n",
            "skills/pdf/SKILL.md": "Skill.\n",
            "commands/deploy.md": "Deploy.\n",
            "mcp.json": '{"mcpServers": {"github": {}}}',
        },
    )

    result = detect_assets(tmp_path)

    assert _paths(result.agents) == ["agents/reviewer.md"]
    assert result.agents[0].name == "reviewer"
    assert _paths(result.skills) == ["skills/pdf/SKILL.md"]
    assert result.skills[0].name == "pdf"
    assert _paths(result.commands) == ["commands/deploy.md"]
    assert result.commands[0].name == "deploy"
    assert _paths(result.mcp) == ["mcp.json"]
    assert result.counts() == {"agent": 1, "skill": 1, "command": 1, "mcp": 1}


def test_detects_nested_asset_directories(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            "plugins/web/agents/frontend.md": "Agent.\n",
            "plugins/web/skills/css/SKILL.md": "Skill.\n",
            "plugins/web/commands/build/run.md": "Command.\n",
        },
    )

    result = detect_assets(tmp_path)

    assert _paths(result.agents) == ["plugins/web/agents/frontend.md"]
    assert _paths(result.skills) == ["plugins/web/skills/css/SKILL.md"]
    assert _paths(result.commands) == ["plugins/web/commands/build/run.md"]


def test_frontmatter_marks_markdown_as_agent(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            "docs/helper.md": "---\nname: helper\ntools: Read, Grep\n---\nBody\n",
            "docs/modelled.md": "---\nModel: opus\n---\nBody\n",
            "docs/plain.md": "---\nname: plain\n---\nBody mentions tools and model\n",
            "docs/no-header.md": "tools: Read\n",
        },
    )

    result = detect_assets(tmp_path)

    assert _paths(result.agents) == ["docs/helper.md", "docs/modelled.md"]


def test_skill_requires_skills_parent(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            "skills/SKILL.md": "Top level skill file.\n",
            "other/pdf/SKILL.md": "Not under skills.\n",
        },
    )

    assert detect_assets(tmp_path).skills == []


def test_skips_hidden_and_dependency_directories(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            ".git/agents/hidden.md": "x",
            "node_modules/pkg/agents/dep.md": "x",
            "__pycache__/agents/cache.md": "x",
            "venv/agents/env.md": "x",
            "lib/site-packages/agents/site.md": "x",
            "agents/real.md": "x",
        },
    )

    assert _paths(detect_assets(tmp_path).agents) == ["agents/real.md"]


def test_mcp_named_json_requires_servers_key(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            "configs/team-mcp.json": '{"mcpServers": {"a": {}}}',
            "configs/other-mcp.json": '{"servers": {}}',
            "configs/broken-mcp.json": "{not json",
            "configs/list-mcp.json": "[1, 2]",
            "configs/servers.json": '{"mcpServers": {"b": {}}}',
        },
    )

    assert _paths(detect_assets(tmp_path).mcp) == ["configs/team-mcp.json"]


def test_fixed_mcp_locations_include_hidden_file(tmp_path: Path) -> None:
    write_tree(
        tmp_path,
        {
            ".mcp.json": '{"mcpServers": {"a": {}}}',
            "config/mcp.json": '{"mcpServers": {"b": {}}}',
        },
    )

    assert sorted(_paths(detect_assets(tmp_path).mcp)) == [".mcp.json", "config/mcp.json"]


def test_same_path_is_reported_once_per_type(tmp_path: Path) -> None:
    write_tree(tmp_path, {"mcp.json": '{"mcpServers": {}}'})

    assert _paths(detect_assets(tmp_path).mcp) == ["mcp.json"]


def test_missing_root_yields_empty_result(tmp_path: Path) -> None:
    result = detect_assets(tmp_path / "missing")

    assert result.flatten() == []


def test_symlink_cycle_terminates(tmp_path: Path) -> None:
    write_tree(tmp_path, {"agents/a.md": "x"})
    os.symlink(tmp_path, tmp_path / "agents" / "loop")

    result = detect_assets(tmp_path)

    assert _paths(result.agents) == ["agents/a.md"]


def test_list_server_names(tmp_path: Path) -> None:
    bundle = tmp_path / "mcp.json"
    bundle.write_text('{"mcpServers": {"github": {}, "fs": {}}}', encoding="utf-8")

    assert list_server_names(bundle) == ["github", "fs"]
    assert list_server_names(tmp_path / "missing.json") == []
