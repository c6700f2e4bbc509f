"""Resolution of user-supplied asset selectors against a source's cached assets."""

from dataclasses import dataclass, field

from ccm.models.asset import Asset, AssetType
from ccm.models.source import Source


@dataclass(frozen=True)
class ResolvedAssets:
    """Assets matched by selectors, plus the selectors that matched nothing."""

    assets: list[Asset] = field(default_factory=list)
    unknown: list[str] = field(default_factory=list)


def resolve_assets(
    source: Source,
    selectors: tuple[str, ...],
    *,
    select_all: bool,
    asset_type: AssetType | None,
) -> ResolvedAssets:
    """Match selectors (relative path or display name) against a source's assets.

    Args:
        source: Source whose cached assets are searched
        selectors: Asset paths or names given on the command line
        select_all: Select every asset (of asset_type, if given) regardless of selectors
        asset_type: Restrict matches to one asset type
    """
    candidates = [a for a in source.assets if asset_type is None or a.type == asset_type]
    if select_all:
        return ResolvedAssets(assets=candidates)

    matched: list[Asset] = []
    unknown: list[str] = []
    for selector in selectors:
        hits = [a for a in candidates if a.path == selector]
        if not hits:
            hits = [a for a in candidates if a.name == selector]
        if not hits:
            unknown.append(selector)
            continue
        for asset in hits:
            if asset not in matched:
                matched.append(asset)

    return ResolvedAssets(assets=matched, unknown=unknown)
