"""Stray assets: unmanaged files in the Claude agents, skills and commands directories.

A stray is anything under the agents, skills or commands roots that is neither a
tracked link nor a symlink into a registered source or the local vault. Migration
adopts strays into the local vault source ("local"), replacing each original with
a link back into the vault.

A symlinked folder inside agents or commands is flattened: its nested core/x.md
becomes the stray core-x, and is no longer a stray once core-x is linked
from the vault. Files reached through such a folder belong to another
project and are copied, never deleted. The folder link itself is released once
every stray found under it has been adopted.
"""

import logging
import os
import shutil
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from ccm.context import CcmContext
from ccm.errors import CcmError, ConflictError
from ccm.models.asset import LinkableType
from ccm.models.results import BatchResult, ItemOutcome
from ccm.models.source import LocalSource
from ccm.models.state import Selection
from ccm.paths import CcmEnvironment
from ccm.registry import SourceRegistry
from ccm.sources import refresh_source

logger = logging.getLogger(__name__)

VAULT_ALIAS = "local"


@dataclass(frozen=True)
class StrayAsset:
    """An unmanaged asset found in a Claude directory.

    Attributes:
        type: Asset kind, from the directory it was found in
        path: Entry name relative to the type root ("x.md", "core-x.md" or a skill name)
        name: Name the asset keeps in the vault
        full_path: Location of the file or skill directory to adopt
        is_external_symlink: Whether the asset is reached through a symlink to
            somewhere outside ccm
        source_folder: Name of the symlinked folder a flattened asset came from
    """

    type: LinkableType
    path: str
    name: str
    full_path: Path
    is_external_symlink: bool = False
    source_folder: str | None = None

    @property
    def display_path(self) -> str:
        """Path shown to and typed by the user, e.g. agents/x.md or skills/pdf/."""
        if self.type == "skill":
            return f"skills/{self.name}/"
        return f"{self.type}s/{self.path}"


@dataclass(frozen=True)
class StrayScan:
    agents: list[StrayAsset] = field(default_factory=list)
    skills: list[StrayAsset] = field(default_factory=list)
    commands: list[StrayAsset] = field(default_factory=list)

    @property
    def all(self) -> list[StrayAsset]:
        return [*self.agents, *self.skills, *self.commands]


@dataclass(frozen=True)
class StrayMigration:
    """Outcome of adopting strays.

    Attributes:
        result: One outcome per stray, keyed by display path
        released_folders: Folder links removed because every asset under them was adopted
    """

    result: BatchResult
    released_folders: list[Path] = field(default_factory=list)


def _link_target(path: Path) -> Path:
    return Path(os.path.normpath(path.parent / path.readlink()))


def _within(path: Path, roots: Iterable[Path]) -> bool:
    return any(path.is_relative_to(root) for root in roots)


def _managed_roots(env: CcmEnvironment, registry: SourceRegistry) -> list[Path]:
    roots = [env.sources_dir, env.vault_dir]
    roots.extend(source.local_path for source in registry.list_sources())
    return roots + [root.resolve() for root in roots]


def _tracked_paths(registry: SourceRegistry) -> set[Path]:
    tracked: set[Path] = set()
    for selection in registry.list_selections():
        tracked.add(selection.linked_path)
        if selection.type == "skill":
            tracked.add(selection.linked_path.parent)
    return tracked


def is_managed_link(path: Path, managed_roots: Iterable[Path]) -> bool:
    """Check whether path is a symlink pointing into a ccm-managed directory."""
    if not path.is_symlink():
        return False
    roots = list(managed_roots)
    try:
        target = _link_target(path)
    except OSError as e:
        logger.debug("Unreadable link %s: %s", path, e)
        return False
    return _within(target, roots) or _within(path.resolve(), roots)


def _flatten_folder(
    folder: Path, asset_type: LinkableType, roots: list[Path], tracked: set[Path]
) -> list[StrayAsset]:
    strays: list[StrayAsset] = []
    for dirpath, dirnames, filenames in os.walk(folder):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if filename.startswith(".") or not filename.endswith(".md") or path.is_symlink():
                continue
            name = "-".join(path.relative_to(folder).with_suffix("").parts)
            adopted = folder.parent / f"{name}.md"
            if adopted in tracked or is_managed_link(adopted, roots):
                continue
            strays.append(
                StrayAsset(
                    type=asset_type,
                    path=f"{name}.md",
                    name=name,
                    full_path=path,
                    is_external_symlink=True,
                    source_folder=folder.name,
                )
            )
    return strays


def _scan_markdown(
    directory: Path,
    asset_type: Literal["agent", "command"],
    roots: list[Path],
    tracked: set[Path],
) -> list[StrayAsset]:
    if not directory.is_dir():
        return []

    parent_external = False
    if directory.is_symlink():
        if is_managed_link(directory, roots):
            return []
        parent_external = True

    strays: list[StrayAsset] = []
    for entry in sorted(directory.iterdir()):
        if entry.name.startswith(".") or entry in tracked or is_managed_link(entry, roots):
            continue
        if entry.is_symlink() and entry.is_dir():
            strays.extend(_flatten_folder(entry, asset_type, roots, tracked))
            continue
        if not entry.name.endswith(".md") or not entry.is_file():
            continue
        strays.append(
            StrayAsset(
                type=asset_type,
                path=entry.name,
                name=entry.name.removesuffix(".md"),
                full_path=entry,
                is_external_symlink=parent_external or entry.is_symlink(),
            )
        )
    return strays


def _scan_skills(directory: Path, roots: list[Path], tracked: set[Path]) -> list[StrayAsset]:
    if not directory.is_dir():
        return []

    parent_external = False
    if directory.is_symlink():
        if is_managed_link(directory, roots):
            return []
        parent_external = True

    strays: list[StrayAsset] = []
    for entry in sorted(directory.iterdir()):
        if entry.name.startswith(".") or not entry.is_dir() or is_managed_link(entry, roots):
            continue
        skill_md = entry / "SKILL.md"
        if not skill_md.is_file() or skill_md in tracked or is_managed_link(skill_md, roots):
            continue
        strays.append(
            StrayAsset(
                type="skill",
                path=entry.name,
                name=entry.name,
                full_path=entry,
                is_external_symlink=parent_external or entry.is_symlink(),
            )
        )
    return strays


def scan_stray_assets(env: CcmEnvironment, registry: SourceRegistry) -> StrayScan:
    """Find unmanaged agents, skills and commands in the Claude directories."""
    roots = _managed_roots(env, registry)
    tracked = _tracked_paths(registry)
    return StrayScan(
        agents=_scan_markdown(env.agents_dir, "agent", roots, tracked),
        skills=_scan_skills(env.skills_dir, roots, tracked),
        commands=_scan_markdown(env.commands_dir, "command", roots, tracked),
    )


def resolve_name_conflicts(strays: list[StrayAsset]) -> list[StrayAsset]:
    """Prefix flattened strays with their folder name when another stray has the same name."""
    counts = Counter((stray.type, stray.name) for stray in strays)
    resolved: list[StrayAsset] = []
    for stray in strays:
        if counts[(stray.type, stray.name)] > 1 and stray.source_folder is not None:
            name = f"{stray.source_folder}-{stray.name}"
            stray = replace(stray, name=name, path=f"{name}.md")
        resolved.append(stray)
    return resolved


def ensure_vault_source(ctx: CcmContext) -> LocalSource:
    """Return the local vault source, registering it on first use.

    Raises:
        ConflictError: If the vault alias belongs to another source
    """
    vault = ctx.env.vault_dir
    source = ctx.registry.get_source(VAULT_ALIAS)
    if source is None:
        vault.mkdir(parents=True, exist_ok=True)
        created = LocalSource(
            alias=VAULT_ALIAS,
            local_path=vault,
            assets=[],
            updated_at=datetime.now(UTC).isoformat(),
        )
        ctx.registry.add_source(created)
        return created

    if not isinstance(source, LocalSource) or source.local_path.resolve() != vault.resolve():
        raise ConflictError(
            f"Alias '{VAULT_ALIAS}' belongs to {source.local_path}, not the local vault {vault}"
        )
    vault.mkdir(parents=True, exist_ok=True)
    return source


def migrate_stray(ctx: CcmContext, stray: StrayAsset) -> Selection:
    """Move one stray into the vault and link it back under its own name.

    Raises:
        ConflictError: If the vault or the Claude directory already holds that name
        OSError: If a filesystem operation fails
    """
    plural = f"{stray.type}s"
    target_name = stray.name if stray.type == "skill" else f"{stray.name}.md"
    vault_path = ctx.env.vault_dir / plural / target_name
    claude_path = ctx.env.target_dir(stray.type) / target_name

    if vault_path.exists() or vault_path.is_symlink():
        raise ConflictError(f"{plural}/{target_name} already exists in the local vault")
    if claude_path != stray.full_path and (claude_path.exists() or claude_path.is_symlink()):
        raise ConflictError(f"{claude_path} already exists")

    vault_path.parent.mkdir(parents=True, exist_ok=True)
    if stray.type == "skill":
        shutil.copytree(stray.full_path, vault_path)
    else:
        shutil.copyfile(stray.full_path, vault_path)

    if stray.full_path.is_symlink():
        stray.full_path.unlink()
    elif stray.source_folder is not None:
        logger.debug("Keeping %s in its source folder", stray.full_path)
    elif stray.full_path.is_dir():
        shutil.rmtree(stray.full_path)
    else:
        stray.full_path.unlink()

    if stray.type == "skill":
        claude_path.mkdir(parents=True, exist_ok=True)
        linked_path = claude_path / "SKILL.md"
        linked_path.symlink_to(vault_path / "SKILL.md")
        asset_path = f"skills/{stray.name}/SKILL.md"
    else:
        claude_path.parent.mkdir(parents=True, exist_ok=True)
        claude_path.symlink_to(vault_path)
        linked_path = claude_path
        asset_path = f"{plural}/{target_name}"
    logger.debug("Adopted %s into %s", stray.full_path, vault_path)

    selection = Selection(
        repo_alias=VAULT_ALIAS, asset_path=asset_path, type=stray.type, linked_path=linked_path
    )
    ctx.registry.add_selection(selection)
    return selection


def migrate_strays(ctx: CcmContext, strays: list[StrayAsset]) -> StrayMigration:
    """Adopt several strays, reporting each failure instead of stopping.

    Raises:
        ConflictError: If the vault alias belongs to another source
    """
    ensure_vault_source(ctx)

    folder_members: dict[Path, set[Path]] = {}
    for found in scan_stray_assets(ctx.env, ctx.registry).all:
        if found.source_folder is not None:
            folder = ctx.env.target_dir(found.type) / found.source_folder
            folder_members.setdefault(folder, set()).add(found.full_path)

    outcomes: list[ItemOutcome] = []
    adopted: set[Path] = set()
    for stray in resolve_name_conflicts(strays):
        try:
            migrate_stray(ctx, stray)
        except (OSError, CcmError) as e:
            outcomes.append(ItemOutcome(key=stray.display_path, ok=False, error=str(e)))
            continue
        outcomes.append(ItemOutcome(key=stray.display_path, ok=True))
        adopted.add(stray.full_path)

    released: list[Path] = []
    for folder, members in folder_members.items():
        if members <= adopted and folder.is_symlink():
            folder.unlink()
            released.append(folder)

    if adopted:
        refresh_source(ctx, VAULT_ALIAS)

    return StrayMigration(result=BatchResult(outcomes=outcomes), released_folders=released)
