"""Symlink lifecycle for selected assets.

Agents and commands link as <alias>-<file name> directly under their target
root. Skills get a directory <alias>-<skill name> holding a single SKILL.md link.
MCP bundles are never linked; their servers are staged (see ccm.staging).
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import assert_never

from ccm.alias import namespaced_name
from ccm.errors import AssetNotFoundError, CcmError, InvalidAssetTypeError, SourceNotFoundError
from ccm.models.asset import Asset, LinkableType
from ccm.models.health import BrokenReason, CureResult, Diagnosis, LinkHealth
from ccm.models.results import BatchResult, ItemOutcome
from ccm.models.state import Selection
from ccm.paths import CcmEnvironment
from ccm.registry import SourceRegistry

logger = logging.getLogger(__name__)


def link_path_for(env: CcmEnvironment, alias: str, asset_type: LinkableType, asset: Asset) -> Path:
    """Compute where the link for an asset lives."""
    target_root = env.target_dir(asset_type)
    if asset_type == "skill":
        return target_root / namespaced_name(alias, asset.name) / "SKILL.md"
    if asset_type == "agent" or asset_type == "command":
        return target_root / namespaced_name(alias, Path(asset.path).name)
    assert_never(asset_type)


def _remove_link(link_path: Path, is_skill: bool) -> None:
    """Remove a link and, for skills, its containing directory.

    A skill directory that cannot be removed is left in place.
    """
    if link_path.is_symlink():
        link_path.unlink()

    if is_skill:
        try:
            link_path.parent.rmdir()
        except OSError as e:
            logger.debug("Leaving skill directory %s: %s", link_path.parent, e)


class LinkManager:
    """Creates, removes, diagnoses and repairs asset links."""

    def __init__(self, env: CcmEnvironment, registry: SourceRegistry) -> None:
        self._env = env
        self._registry = registry

    def link(self, repo_alias: str, asset: Asset) -> Selection:
        """Link an asset into the target tree and record the selection.

        Relinking replaces the existing link. When the selection already exists
        with a different link path, as for a command whose front matter also
        makes it an agent, the old link is removed so no untracked link remains.

        Raises:
            SourceNotFoundError: If no source has repo_alias
            InvalidAssetTypeError: For MCP bundles, which must be staged
            AssetNotFoundError: If the asset file is missing from the source
        """
        source = self._registry.get_source(repo_alias)
        if source is None:
            raise SourceNotFoundError(repo_alias)

        asset_type = asset.type
        if asset_type == "mcp":
            raise InvalidAssetTypeError(
                f"MCP bundle {asset.path} cannot be linked; stage its servers instead"
            )

        source_path = source.local_path / asset.path
        if not source_path.exists():
            raise AssetNotFoundError(repo_alias, asset.path)

        link_path = link_path_for(self._env, repo_alias, asset_type, asset)
        previous = self._find_selection(repo_alias, asset.path)
        if previous is not None and previous.linked_path != link_path:
            _remove_link(previous.linked_path, is_skill=previous.type == "skill")
            logger.debug("Replaced link %s with %s", previous.linked_path, link_path)

        link_path.parent.mkdir(parents=True, exist_ok=True)

        if link_path.is_symlink():
            link_path.unlink()
        link_path.symlink_to(source_path)
        logger.debug("Linked %s -> %s", link_path, source_path)

        selection = Selection(
            repo_alias=repo_alias,
            asset_path=asset.path,
            type=asset_type,
            linked_path=link_path,
        )
        self._registry.add_selection(selection)
        return selection

    def _find_selection(self, repo_alias: str, asset_path: str) -> Selection | None:
        for selection in self._registry.list_selections_for_source(repo_alias):
            if selection.asset_path == asset_path:
                return selection
        return None

    def unlink(self, repo_alias: str, asset_path: str) -> bool:
        """Remove a selection and its link.

        Returns:
            False if the asset was not selected, True otherwise
        """
        selection = self._registry.remove_selection(repo_alias, asset_path)
        if selection is None:
            return False

        _remove_link(selection.linked_path, is_skill=selection.type == "skill")
        return True

    def link_many(self, repo_alias: str, assets: Iterable[Asset]) -> BatchResult:
        """Link several assets, reporting each failure instead of stopping."""
        outcomes: list[ItemOutcome] = []
        for asset in assets:
            try:
                self.link(repo_alias, asset)
            except (OSError, CcmError) as e:
                outcomes.append(ItemOutcome(key=asset.path, ok=False, error=str(e)))
                continue
            outcomes.append(ItemOutcome(key=asset.path, ok=True))
        return BatchResult(outcomes=outcomes)

    def unlink_many(self, repo_alias: str, asset_paths: Iterable[str]) -> BatchResult:
        outcomes: list[ItemOutcome] = []
        for asset_path in asset_paths:
            try:
                removed = self.unlink(repo_alias, asset_path)
            except OSError as e:
                outcomes.append(ItemOutcome(key=asset_path, ok=False, error=str(e)))
                continue
            if removed:
                outcomes.append(ItemOutcome(key=asset_path, ok=True))
            else:
                outcomes.append(ItemOutcome(key=asset_path, ok=False, error="not linked"))
        return BatchResult(outcomes=outcomes)

    def remove_links_for_source(self, repo_alias: str) -> int:
        """Remove the on-disk links of every selection of a source.

        Selection records are left to the registry cascade.

        Returns:
            Number of selections whose links were processed
        """
        selections = self._registry.list_selections_for_source(repo_alias)
        for selection in selections:
            try:
                _remove_link(selection.linked_path, is_skill=selection.type == "skill")
            except OSError as e:
                logger.warning("Could not remove link %s: %s", selection.linked_path, e)
        return len(selections)

    def _broken_reason(self, selection: Selection) -> BrokenReason | None:
        link_path = selection.linked_path
        if not link_path.is_symlink():
            if link_path.exists():
                return "not_a_symlink"
            return "link_missing"

        source = self._registry.get_source(selection.repo_alias)
        if source is None:
            return "source_removed"

        if not (source.local_path / selection.asset_path).exists():
            return "asset_missing"
        return None

    def diagnose(self) -> Diagnosis:
        """Classify every selection as healthy or broken."""
        healthy: list[LinkHealth] = []
        broken: list[LinkHealth] = []

        for selection in self._registry.list_selections():
            reason = self._broken_reason(selection)
            if reason is None:
                healthy.append(LinkHealth(selection=selection, healthy=True))
            else:
                broken.append(LinkHealth(selection=selection, healthy=False, reason=reason))

        return Diagnosis(healthy=healthy, broken=broken)

    def cure(self) -> CureResult:
        """Remove broken links and their selections.

        A failure on one entry is recorded and the remaining entries are still
        processed.
        """
        fixed = 0
        errors: list[str] = []

        for health in self.diagnose().broken:
            selection = health.selection
            try:
                _remove_link(selection.linked_path, is_skill=selection.type == "skill")
                self._registry.remove_selection(selection.repo_alias, selection.asset_path)
            except OSError as e:
                errors.append(f"Failed to fix {selection.linked_path}: {e}")
                continue
            fixed += 1

        return CureResult(fixed=fixed, errors=errors)
