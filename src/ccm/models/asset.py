"""Asset models produced by detection."""

from dataclasses import dataclass, field
from typing import Literal

from ccm.models.base import StoreModel

AssetType = Literal["agent", "skill", "command", "mcp"]
LinkableType = Literal["agent", "skill", "command"]

ASSET_TYPES: tuple[AssetType, ...] = ("agent", "skill", "command", "mcp")

# Mapping from singular to plural forms
ASSET_TYPE_PLURALS: dict[AssetType, str] = {
    "agent": "agents",
    "skill": "skills",
    "command": "commands",
    "mcp": "mcp",
}


class Asset(StoreModel):
    """A detected item inside a source directory.

    path is relative to the source root with "/" separators and identifies the
    asset within its source.
    """

    type: AssetType
    path: str
    name: str


@dataclass(frozen=True)
class DetectionResult:
    """Assets of one detection pass, grouped by type."""

    agents: list[Asset] = field(default_factory=list)
    skills: list[Asset] = field(default_factory=list)
    commands: list[Asset] = field(default_factory=list)
    mcp: list[Asset] = field(default_factory=list)

    def flatten(self) -> list[Asset]:
        return [*self.agents, *self.skills, *self.commands, *self.mcp]

    def counts(self) -> dict[AssetType, int]:
        return {
            "agent": len(self.agents),
            "skill": len(self.skills),
            "command": len(self.commands),
            "mcp": len(self.mcp),
        }
