"""Source models: registered origins of assets."""

from pathlib import Path
from typing import Annotated, Literal

from pydantic import Field

from ccm.models.asset import Asset, AssetType
from ccm.models.base import StoreModel


class _SourceBase(StoreModel):
    alias: str
    local_path: Path
    assets: list[Asset] = Field(default_factory=list)
    updated_at: str = ""

    def find_asset(self, asset_path: str) -> Asset | None:
        """Return the cached asset with the given relative path, if any."""
        for asset in self.assets:
            if asset.path == asset_path:
                return asset
        return None

    def assets_of_type(self, asset_type: AssetType) -> list[Asset]:
        return [asset for asset in self.assets if asset.type == asset_type]


class GitHubSource(_SourceBase):
    """Source cloned from GitHub into the sources cache."""

    registry_type: Literal["github"] = "github"
    url: str
    owner: str
    repo: str

    @property
    def identity(self) -> str:
        return f"{self.owner}/{self.repo}"


class LocalSource(_SourceBase):
    """Source backed by a user-owned directory that ccm never clones or deletes."""

    registry_type: Literal["local"] = "local"

    @property
    def identity(self) -> str:
        return str(self.local_path)


Source = Annotated[GitHubSource | LocalSource, Field(discriminator="registry_type")]
