"""Asset detection in source directories.

Classification rules, applied independently to every file of the tree:

- agent: *.md under a directory named "agents" (any depth), or any other *.md
  whose front matter mentions "tools" or "model"
- skill: .../skills/<name>/SKILL.md (any depth), named after <name>
- command: *.md under a directory named "commands" (any depth)
- mcp: *.json with "mcp" in its name whose top-level object has "mcpServers",
  plus the fixed locations mcp.json, .mcp.json and config/mcp.json

Hidden directories and dependency caches are never entered. Unreadable entries
and malformed files are skipped; detection never raises for content problems.
"""

import json
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from ccm.io.frontmatter import has_agent_frontmatter
from ccm.models.asset import Asset, AssetType, DetectionResult

logger = logging.getLogger(__name__)

EXCLUDED_DIR_NAMES = frozenset({"node_modules", "__pycache__", "venv", "site-packages"})
MCP_CANDIDATE_PATHS = ("mcp.json", ".mcp.json", "config/mcp.json")
MCP_SERVERS_KEY = "mcpServers"


def _is_excluded(name: str) -> bool:
    return name.startswith(".") or name in EXCLUDED_DIR_NAMES


def _walk_files(root: Path) -> Iterator[tuple[tuple[str, ...], Path]]:
    """Yield (relative parts, path) for every regular file below root.

    Symlinked directories are followed; a set of resolved directory paths stops
    symlink cycles from being walked twice.
    """
    visited: set[Path] = set()
    stack: list[tuple[Path, tuple[str, ...]]] = [(root, ())]

    while stack:
        directory, prefix = stack.pop()
        try:
            resolved = directory.resolve()
        except OSError:
            continue
        if resolved in visited:
            continue
        visited.add(resolved)

        try:
            entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", directory, e)
            continue

        subdirectories: list[tuple[Path, tuple[str, ...]]] = []
        for entry in entries:
            if _is_excluded(entry.name):
                continue
            parts = (*prefix, entry.name)
            try:
                if entry.is_dir(follow_symlinks=True):
                    subdirectories.append((Path(entry.path), parts))
                elif entry.is_file(follow_symlinks=True):
                    yield parts, Path(entry.path)
            except OSError:
                continue

        # Reversed so the stack pops directories in name order
        stack.extend(reversed(subdirectories))


def _load_json_object(path: Path) -> dict[str, Any] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug("Skipping unparsable JSON %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    return data


def is_mcp_config(path: Path) -> bool:
    """Check whether a JSON file's top-level object has an mcpServers key."""
    data = _load_json_object(path)
    return data is not None and MCP_SERVERS_KEY in data


def _stem(name: str) -> str:
    return name.rsplit(".", 1)[0] if "." in name else name


class _Collector:
    """Accumulates assets per type, suppressing duplicate paths within a type."""

    def __init__(self) -> None:
        self._assets: dict[AssetType, dict[str, Asset]] = {
            "agent": {},
            "skill": {},
            "command": {},
            "mcp": {},
        }

    def add(self, asset_type: AssetType, path: str, name: str) -> None:
        by_path = self._assets[asset_type]
        if path not in by_path:
            by_path[path] = Asset(type=asset_type, path=path, name=name)

    def result(self) -> DetectionResult:
        return DetectionResult(
            agents=list(self._assets["agent"].values()),
            skills=list(self._assets["skill"].values()),
            commands=list(self._assets["command"].values()),
            mcp=list(self._assets["mcp"].values()),
        )


def detect_assets(root: Path) -> DetectionResult:
    """Detect all assets below root.

    Args:
        root: Source directory to scan

    Returns:
        DetectionResult, empty when root does not exist
    """
    collector = _Collector()
    if not root.is_dir():
        return collector.result()

    for parts, path in _walk_files(root):
        relative = "/".join(parts)
        directories = parts[:-1]
        filename = parts[-1]
        lowered = filename.lower()

        if lowered.endswith(".md"):
            if "agents" in directories or has_agent_frontmatter(path):
                collector.add("agent", relative, _stem(filename))
            if filename == "SKILL.md" and len(directories) >= 2 and directories[-2] == "skills":
                collector.add("skill", relative, directories[-1])
            if "commands" in directories:
                collector.add("command", relative, _stem(filename))
        elif lowered.endswith(".json") and "mcp" in lowered and is_mcp_config(path):
            collector.add("mcp", relative, _stem(filename))

    for candidate in MCP_CANDIDATE_PATHS:
        path = root / candidate
        if path.is_file() and is_mcp_config(path):
            collector.add("mcp", candidate, _stem(path.name))

    return collector.result()


def flatten_assets(result: DetectionResult) -> list[Asset]:
    return result.flatten()


def asset_counts(result: DetectionResult) -> dict[AssetType, int]:
    return result.counts()


def list_server_names(bundle_path: Path) -> list[str]:
    """Return the server names listed in an MCP bundle.

    Returns an empty list when the file is missing, unparsable or malformed.
    """
    data = _load_json_object(bundle_path)
    if data is None:
        return []
    servers = data.get(MCP_SERVERS_KEY)
    if not isinstance(servers, dict):
        return []
    return list(servers.keys())
