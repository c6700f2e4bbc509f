"""Normalization of older store shapes.

Every load runs two passes before any business logic sees the state:

1. normalize_raw_state works on the raw JSON and brings each record to the
   current shape (missing registryType means a GitHub source; MCP bundles were
   once recorded as selections and are dropped).
2. migrate_legacy_aliases rewrites truncated aliases ("acme", "acme2") to the
   owner.repo form and rekeys everything that referenced them.
"""

import logging
from pathlib import Path
from typing import Any

from ccm.alias import base_alias, is_legacy_alias, resolve_collision
from ccm.models.source import GitHubSource, Source
from ccm.models.state import RegistryState, Selection, StagedMcpServer

logger = logging.getLogger(__name__)


def _dict_records(raw: Any) -> list[dict[str, Any]]:
    if not isinstance(raw, list):
        return []
    return [record for record in raw if isinstance(record, dict)]


def normalize_raw_state(raw: Any) -> dict[str, list[dict[str, Any]]]:
    """Bring a parsed store document to the current record shapes.

    Args:
        raw: Parsed JSON of any shape

    Returns:
        Dict with repositories, selections and stagedMcp lists of record dicts
    """
    if not isinstance(raw, dict):
        return {"repositories": [], "selections": [], "stagedMcp": []}

    repositories: list[dict[str, Any]] = []
    for record in _dict_records(raw.get("repositories")):
        if "registryType" not in record and "registry_type" not in record:
            # Oldest stores only knew GitHub sources
            record = {**record, "registryType": "github"}
        repositories.append(record)

    selections = [
        record for record in _dict_records(raw.get("selections")) if record.get("type") != "mcp"
    ]

    return {
        "repositories": repositories,
        "selections": selections,
        "stagedMcp": _dict_records(raw.get("stagedMcp")),
    }


def _rename_prefixed_parts(path: Path, old_alias: str, new_alias: str) -> Path:
    old_prefix = f"{old_alias}-"
    new_prefix = f"{new_alias}-"
    parts = [
        new_prefix + part.removeprefix(old_prefix) if part.startswith(old_prefix) else part
        for part in path.parts
    ]
    return Path(*parts)


def _relocate_link(old_link: Path, new_link: Path, target: Path, is_skill: bool) -> None:
    """Move an existing symlink to its migrated name, pointing at the migrated source.

    Missing links are left alone; doctor reports them afterwards.
    """
    if not old_link.is_symlink():
        return
    try:
        old_link.unlink()
        if is_skill and old_link.parent != new_link.parent:
            try:
                old_link.parent.rmdir()
            except OSError as e:
                logger.debug("Leaving skill directory %s: %s", old_link.parent, e)
        new_link.parent.mkdir(parents=True, exist_ok=True)
        if new_link.is_symlink():
            new_link.unlink()
        new_link.symlink_to(target)
    except OSError as e:
        logger.debug("Could not relocate link %s -> %s: %s", old_link, new_link, e)


def _migrate_source_dir(source: GitHubSource, new_alias: str, sources_dir: Path) -> Path:
    old_path = source.local_path
    new_path = sources_dir / new_alias

    if old_path.exists() and not new_path.exists():
        try:
            old_path.rename(new_path)
        except OSError as e:
            logger.debug("Could not rename %s to %s: %s", old_path, new_path, e)
            return old_path
        return new_path

    if new_path.exists():
        return new_path
    return old_path


def migrate_legacy_aliases(
    state: RegistryState, sources_dir: Path
) -> tuple[RegistryState, bool]:
    """Rewrite legacy GitHub source aliases to the owner.repo form.

    Renames each migrated source directory under sources_dir when possible (the
    old path is kept if the rename fails), rekeys selections and staged servers,
    and moves existing links whose names carry the old alias prefix.

    Returns:
        Tuple of (new state, whether anything was migrated)
    """
    taken = state.aliases()
    alias_mapping: dict[str, str] = {}

    for source in state.repositories:
        if not isinstance(source, GitHubSource) or not is_legacy_alias(source.alias):
            continue
        new_alias = resolve_collision(base_alias(source.owner, source.repo), taken)
        taken.add(new_alias)
        alias_mapping[source.alias] = new_alias

    if not alias_mapping:
        return state, False

    repositories: list[Source] = []
    new_roots: dict[str, Path] = {}
    for source in state.repositories:
        new_alias = alias_mapping.get(source.alias)
        if new_alias is None or not isinstance(source, GitHubSource):
            repositories.append(source)
            continue
        new_root = _migrate_source_dir(source, new_alias, sources_dir)
        new_roots[new_alias] = new_root
        logger.debug("Migrated legacy alias %s -> %s", source.alias, new_alias)
        repositories.append(source.model_copy(update={"alias": new_alias, "local_path": new_root}))

    selections: list[Selection] = []
    for selection in state.selections:
        new_alias = alias_mapping.get(selection.repo_alias)
        if new_alias is None:
            selections.append(selection)
            continue
        new_link = _rename_prefixed_parts(selection.linked_path, selection.repo_alias, new_alias)
        _relocate_link(
            selection.linked_path,
            new_link,
            new_roots[new_alias] / selection.asset_path,
            is_skill=selection.type == "skill",
        )
        selections.append(
            selection.model_copy(update={"repo_alias": new_alias, "linked_path": new_link})
        )

    staged: list[StagedMcpServer] = []
    for entry in state.staged_mcp:
        new_alias = alias_mapping.get(entry.repo_alias)
        if new_alias is None:
            staged.append(entry)
        else:
            staged.append(entry.model_copy(update={"repo_alias": new_alias}))

    migrated = RegistryState(repositories=repositories, selections=selections, staged_mcp=staged)
    return migrated, True
