"""Source lifecycle: registration, refresh and removal.

GitHub sources are cloned into the sources cache under their alias; local
sources point at a directory the user owns. Detection runs on registration and
on every refresh, replacing the cached asset list.
"""

import logging
import shutil
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import assert_never

from ccm.alias import generate_alias, generate_local_alias, parse_github_url
from ccm.context import CcmContext
from ccm.detection import asset_counts, detect_assets, flatten_assets
from ccm.errors import (
    CcmError,
    ConflictError,
    DuplicateSourceError,
    InvalidGitHubUrlError,
    InvalidInputError,
    SourceNotFoundError,
)
from ccm.models.results import BatchResult, ItemOutcome
from ccm.models.source import GitHubSource, LocalSource, Source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemovalResult:
    """Outcome of removing a source.

    Attributes:
        removed: The source that was removed
        unlinked_count: Number of selections whose links were removed
    """

    removed: Source
    unlinked_count: int


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _find_github_source(ctx: CcmContext, owner: str, repo: str) -> GitHubSource | None:
    for source in ctx.registry.list_sources():
        if (
            isinstance(source, GitHubSource)
            and source.owner.lower() == owner.lower()
            and source.repo.lower() == repo.lower()
        ):
            return source
    return None


def clone_source(ctx: CcmContext, url: str) -> GitHubSource:
    """Clone a GitHub repository into the sources cache and register it.

    Args:
        ctx: Application context
        url: GitHub URL or owner/repo shorthand

    Raises:
        InvalidGitHubUrlError: If url is not a recognizable GitHub reference
        DuplicateSourceError: If the same owner/repo is already registered
        ConflictError: If the target cache directory already exists
        RuntimeError: If the clone fails
    """
    identity = parse_github_url(url)
    if identity is None:
        raise InvalidGitHubUrlError(url)

    existing = _find_github_source(ctx, identity.owner, identity.repo)
    if existing is not None:
        raise DuplicateSourceError(existing.alias, f"{identity.owner}/{identity.repo}")

    alias = generate_alias(ctx.registry, identity.owner, identity.repo)
    local_path = ctx.env.source_dir(alias)
    if local_path.exists():
        raise ConflictError(f"Source directory already exists at {local_path}")

    ctx.git.clone(identity.clone_url, local_path)
    detection = detect_assets(local_path)
    logger.debug("Detected %s in %s", asset_counts(detection), local_path)

    source = GitHubSource(
        alias=alias,
        url=identity.clone_url,
        owner=identity.owner,
        repo=identity.repo,
        local_path=local_path,
        assets=flatten_assets(detection),
        updated_at=_now(),
    )
    ctx.registry.add_source(source)
    return source


def register_local_source(ctx: CcmContext, directory: Path) -> LocalSource:
    """Register an existing directory as a source without copying it.

    Raises:
        InvalidInputError: If directory does not exist or is not a directory
        DuplicateSourceError: If the directory is already registered
    """
    resolved = directory.expanduser().resolve()
    if not resolved.is_dir():
        raise InvalidInputError(f"Not a directory: {directory}")

    for source in ctx.registry.list_sources():
        if isinstance(source, LocalSource) and source.local_path == resolved:
            raise DuplicateSourceError(source.alias, str(resolved))

    alias = generate_local_alias(ctx.registry, resolved)
    source = LocalSource(
        alias=alias,
        local_path=resolved,
        assets=flatten_assets(detect_assets(resolved)),
        updated_at=_now(),
    )
    ctx.registry.add_source(source)
    return source


def refresh_source(ctx: CcmContext, alias: str) -> Source:
    """Update a source's files (GitHub only) and re-detect its assets.

    Raises:
        SourceNotFoundError: If no source has that alias
        FileNotFoundError: If the source directory is gone
        RuntimeError: If the git refresh fails
    """
    source = ctx.registry.get_source(alias)
    if source is None:
        raise SourceNotFoundError(alias)

    if not source.local_path.exists():
        raise FileNotFoundError(f"Source directory not found at {source.local_path}")

    if isinstance(source, GitHubSource):
        ctx.git.refresh(source.local_path)
    elif isinstance(source, LocalSource):
        pass
    else:
        assert_never(source)

    assets = flatten_assets(detect_assets(source.local_path))
    updated = ctx.registry.update_source(alias, assets=assets, updated_at=_now())
    if updated is None:
        raise SourceNotFoundError(alias)
    return updated


def _refresh_each(ctx: CcmContext, aliases: list[str]) -> BatchResult:
    outcomes: list[ItemOutcome] = []
    for alias in aliases:
        try:
            refresh_source(ctx, alias)
        except (CcmError, OSError, RuntimeError) as e:
            outcomes.append(ItemOutcome(key=alias, ok=False, error=str(e)))
            continue
        outcomes.append(ItemOutcome(key=alias, ok=True))
    return BatchResult(outcomes=outcomes)


def refresh_all_sources(ctx: CcmContext) -> BatchResult:
    """Refresh every source, reporting failures per source."""
    return _refresh_each(ctx, [source.alias for source in ctx.registry.list_sources()])


def refresh_active_sources(ctx: CcmContext) -> BatchResult:
    """Refresh only sources with linked assets or staged MCP servers."""
    state = ctx.registry.load()
    active = {s.repo_alias for s in state.selections} | {s.repo_alias for s in state.staged_mcp}
    return _refresh_each(ctx, [s.alias for s in state.repositories if s.alias in active])


def remove_source(ctx: CcmContext, alias: str) -> RemovalResult | None:
    """Remove a source, its links, selections and staged servers.

    The cloned directory of a GitHub source is deleted; a local source's
    directory belongs to the user and is kept.

    Returns:
        RemovalResult, or None if no source has that alias
    """
    source = ctx.registry.get_source(alias)
    if source is None:
        return None

    unlinked_count = ctx.links.remove_links_for_source(alias)
    ctx.registry.remove_source(alias)

    if isinstance(source, GitHubSource):
        if source.local_path.exists():
            shutil.rmtree(source.local_path)
    elif isinstance(source, LocalSource):
        logger.debug("Keeping local source directory %s", source.local_path)
    else:
        assert_never(source)

    return RemovalResult(removed=source, unlinked_count=unlinked_count)
