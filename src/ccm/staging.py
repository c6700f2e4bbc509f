"""Staging and merging of MCP servers.

Servers picked from MCP bundles of any source are staged in the registry. Sync
merges every staged server into one mcpServers map, writes it to the MCP output
file and clears the staging area.
"""

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ccm.detection import MCP_SERVERS_KEY, list_server_names
from ccm.models.results import BatchResult, ItemOutcome
from ccm.models.state import StagedMcpServer
from ccm.paths import CcmEnvironment
from ccm.registry import SourceRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class McpAddition:
    """A staged server as shown in a sync preview."""

    name: str
    source_alias: str
    bundle_filename: str


@dataclass(frozen=True)
class McpPreview:
    """What a sync would do.

    Attributes:
        additions: Staged servers sync will write
        existing: Server names already present in the output file
        unresolved: Staged servers sync will skip because their source, bundle or
            entry is gone
    """

    additions: list[McpAddition] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)
    unresolved: list[McpAddition] = field(default_factory=list)


def _read_servers(bundle_path: Path) -> dict[str, Any] | None:
    try:
        data = json.loads(bundle_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Skipping unreadable MCP bundle %s: %s", bundle_path, e)
        return None
    if not isinstance(data, dict):
        return None
    servers = data.get(MCP_SERVERS_KEY)
    if not isinstance(servers, dict):
        return None
    return servers


def write_mcp_config(path: Path, config: dict[str, Any]) -> None:
    """Write an MCP config atomically, creating parent directories.

    Raises:
        OSError: If the file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = path.with_suffix(".json.tmp")
    with temp_path.open("w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
        f.write("\n")

    temp_path.replace(path)


class McpStager:
    """Stages MCP servers and writes the merged configuration."""

    def __init__(self, env: CcmEnvironment, registry: SourceRegistry) -> None:
        self._env = env
        self._registry = registry

    def stage(self, repo_alias: str, bundle_path: str, server_names: list[str]) -> BatchResult:
        """Stage servers of one bundle. Already staged servers stay staged once."""
        outcomes: list[ItemOutcome] = []
        for name in server_names:
            try:
                self._registry.stage_entry(repo_alias, bundle_path, name)
            except OSError as e:
                outcomes.append(ItemOutcome(key=name, ok=False, error=str(e)))
                continue
            outcomes.append(ItemOutcome(key=name, ok=True))
        return BatchResult(outcomes=outcomes)

    def unstage(self, repo_alias: str, bundle_path: str, server_names: list[str]) -> BatchResult:
        outcomes: list[ItemOutcome] = []
        for name in server_names:
            try:
                removed = self._registry.unstage_entry(repo_alias, bundle_path, name)
            except OSError as e:
                outcomes.append(ItemOutcome(key=name, ok=False, error=str(e)))
                continue
            if removed:
                outcomes.append(ItemOutcome(key=name, ok=True))
            else:
                outcomes.append(ItemOutcome(key=name, ok=False, error="not staged"))
        return BatchResult(outcomes=outcomes)

    def list_server_names(self, bundle_path: Path) -> list[str]:
        return list_server_names(bundle_path)

    def _resolve_staged(self) -> Iterator[tuple[StagedMcpServer, dict[str, Any] | None]]:
        """Pair each staged server with its config, or None when it cannot be resolved.

        Bundles are read once per (source, bundle) pair.
        """
        cache: dict[tuple[str, str], dict[str, Any] | None] = {}

        for entry in self._registry.list_staged_entries():
            cache_key = (entry.repo_alias, entry.asset_path)
            if cache_key not in cache:
                source = self._registry.get_source(entry.repo_alias)
                if source is None:
                    logger.debug(
                        "Skipping %s: source %s is gone", entry.server_name, entry.repo_alias
                    )
                    cache[cache_key] = None
                else:
                    cache[cache_key] = _read_servers(source.local_path / entry.asset_path)

            servers = cache[cache_key]
            if servers is None:
                yield entry, None
                continue
            if entry.server_name not in servers:
                logger.debug(
                    "Skipping %s: not in %s:%s",
                    entry.server_name,
                    entry.repo_alias,
                    entry.asset_path,
                )
                yield entry, None
                continue
            yield entry, servers[entry.server_name]

    def build_merged_config(self) -> dict[str, Any]:
        """Merge every staged server into one MCP config.

        Staged servers whose source, bundle or entry is gone are skipped. When two
        sources stage the same server name, the one staged later wins.

        Returns:
            {"mcpServers": {name: server config, ...}}
        """
        merged: dict[str, Any] = {}
        for entry, config in self._resolve_staged():
            if config is not None:
                merged[entry.server_name] = config
        return {MCP_SERVERS_KEY: merged}

    def existing_server_names(self) -> list[str]:
        """Server names currently in the MCP output file, for display."""
        return list_server_names(self._env.mcp_config_path)

    def preview(self) -> McpPreview:
        """Describe what sync would write.

        Staged servers that sync would skip are listed under unresolved instead of
        additions.
        """
        additions: list[McpAddition] = []
        unresolved: list[McpAddition] = []
        for entry, config in self._resolve_staged():
            addition = McpAddition(
                name=entry.server_name,
                source_alias=entry.repo_alias,
                bundle_filename=entry.bundle_filename,
            )
            if config is None:
                unresolved.append(addition)
            else:
                additions.append(addition)
        return McpPreview(
            additions=additions, existing=self.existing_server_names(), unresolved=unresolved
        )

    def sync(self) -> dict[str, Any]:
        """Write the merged config to the MCP output file and clear staging.

        Staged servers are kept when the write fails, so sync can be retried.

        Returns:
            The config that was written

        Raises:
            OSError: If the output file cannot be written
        """
        merged = self.build_merged_config()
        write_mcp_config(self._env.mcp_config_path, merged)
        self._registry.clear_staged_entries()
        return merged
