"""Shared text formatting for CLI output."""

from ccm.models.asset import ASSET_TYPE_PLURALS, Asset, AssetType
from ccm.models.results import BatchResult
from ccm.models.source import GitHubSource, LocalSource, Source


def format_counts(assets: list[Asset]) -> str:
    """Format asset counts as "2a 1s 0c 1m" (agents, skills, commands, mcp)."""
    counts: dict[AssetType, int] = {"agent": 0, "skill": 0, "command": 0, "mcp": 0}
    for asset in assets:
        counts[asset.type] += 1
    return f"{counts['agent']}a {counts['skill']}s {counts['command']}c {counts['mcp']}m"


def format_origin(source: Source) -> str:
    if isinstance(source, GitHubSource):
        return source.identity
    if isinstance(source, LocalSource):
        return f"local: {source.local_path}"
    raise AssertionError(f"Unknown source type: {type(source).__name__}")


def group_by_type(assets: list[Asset]) -> dict[str, list[Asset]]:
    """Group assets under their plural type name, keeping detection order."""
    grouped: dict[str, list[Asset]] = {}
    for asset in assets:
        grouped.setdefault(ASSET_TYPE_PLURALS[asset.type], []).append(asset)
    return grouped


def format_batch_failures(result: BatchResult) -> list[str]:
    return [f"  ✗ {outcome.key}: {outcome.error}" for outcome in result.failed]
