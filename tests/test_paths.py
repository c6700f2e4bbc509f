"""Tests for CcmEnvironment resolution."""

from pathlib import Path

import pytest

from ccm.paths import CcmEnvironment


def test_for_home_layout() -> None:
    env = CcmEnvironment.for_home(Path("/home/me"))

    assert env.store_path == Path("/home/me/.config/ccm/config.json")
    assert env.sources_dir == Path("/home/me/.local/share/ccm/repos")
    assert env.source_dir("acme.kit") == Path("/home/me/.local/share/ccm/repos/acme.kit")
    assert env.mcp_config_path == Path("/home/me/.claude/mcp.json")
    assert env.target_dir("agent") == Path("/home/me/.claude/agents")
    assert env.target_dir("skill") == Path("/home/me/.claude/skills")
    assert env.target_dir("command") == Path("/home/me/.claude/commands")


def test_mcp_has_no_target_dir() -> None:
    with pytest.raises(ValueError):
        CcmEnvironment.for_home(Path("/home/me")).target_dir("mcp")


def test_from_env_applies_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    env = CcmEnvironment.from_env({"CCM_CONFIG_DIR": "/etc/ccm", "CCM_CLAUDE_DIR": ""})

    assert env.config_dir == Path("/etc/ccm")
    assert env.data_dir == tmp_path / ".local" / "share" / "ccm"
    assert env.claude_dir == tmp_path / ".claude"
