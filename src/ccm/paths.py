"""Well-known filesystem locations used by ccm.

All locations hang off a CcmEnvironment, which is resolved once at CLI entry and
threaded through the application. Tests build one over a temporary directory.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import assert_never

from ccm.models.asset import AssetType

CONFIG_DIR_ENV = "CCM_CONFIG_DIR"
DATA_DIR_ENV = "CCM_DATA_DIR"
CLAUDE_DIR_ENV = "CCM_CLAUDE_DIR"


@dataclass(frozen=True)
class CcmEnvironment:
    """Root directories for registry state, cached sources and link targets.

    Attributes:
        config_dir: Directory holding the registry store (~/.config/ccm)
        data_dir: Directory holding cloned sources and the local vault (~/.local/share/ccm)
        claude_dir: Directory receiving links and the merged MCP config (~/.claude)
    """

    config_dir: Path
    data_dir: Path
    claude_dir: Path

    @staticmethod
    def for_home(home: Path) -> "CcmEnvironment":
        """Create the default layout below a home directory."""
        return CcmEnvironment(
            config_dir=home / ".config" / "ccm",
            data_dir=home / ".local" / "share" / "ccm",
            claude_dir=home / ".claude",
        )

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "CcmEnvironment":
        """Resolve the environment from the home directory and CCM_* overrides."""
        resolved_environ = environ if environ is not None else os.environ
        default = CcmEnvironment.for_home(Path.home())

        def _override(name: str, fallback: Path) -> Path:
            value = resolved_environ.get(name)
            if not value:
                return fallback
            return Path(value).expanduser()

        return CcmEnvironment(
            config_dir=_override(CONFIG_DIR_ENV, default.config_dir),
            data_dir=_override(DATA_DIR_ENV, default.data_dir),
            claude_dir=_override(CLAUDE_DIR_ENV, default.claude_dir),
        )

    @property
    def store_path(self) -> Path:
        """Registry store: config.json in the config directory."""
        return self.config_dir / "config.json"

    @property
    def sources_dir(self) -> Path:
        """Cache root with one cloned directory per source alias."""
        return self.data_dir / "repos"

    @property
    def vault_dir(self) -> Path:
        """Local vault holding assets adopted by migrate."""
        return self.data_dir / "local"

    @property
    def agents_dir(self) -> Path:
        return self.claude_dir / "agents"

    @property
    def skills_dir(self) -> Path:
        return self.claude_dir / "skills"

    @property
    def commands_dir(self) -> Path:
        return self.claude_dir / "commands"

    @property
    def mcp_config_path(self) -> Path:
        """Merged MCP output, rewritten on every sync."""
        return self.claude_dir / "mcp.json"

    def source_dir(self, alias: str) -> Path:
        return self.sources_dir / alias

    def target_dir(self, asset_type: AssetType) -> Path:
        """Return the link target root for a linkable asset type.

        Raises:
            ValueError: For "mcp" bundles, which are merged rather than linked
        """
        if asset_type == "agent":
            return self.agents_dir
        if asset_type == "skill":
            return self.skills_dir
        if asset_type == "command":
            return self.commands_dir
        if asset_type == "mcp":
            raise ValueError("MCP bundles have no link target; stage their servers instead")
        assert_never(asset_type)
