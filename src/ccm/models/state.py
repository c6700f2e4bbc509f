"""Registry state: the whole persisted document."""

from pathlib import Path

from pydantic import Field

from ccm.models.asset import LinkableType
from ccm.models.base import StoreModel
from ccm.models.source import Source


class Selection(StoreModel):
    """An agent, skill or command currently materialized as a link.

    Keyed by (repo_alias, asset_path).
    """

    repo_alias: str
    asset_path: str
    type: LinkableType
    linked_path: Path

    @property
    def key(self) -> tuple[str, str]:
        return (self.repo_alias, self.asset_path)


class StagedMcpServer(StoreModel):
    """One named server of an MCP bundle queued for the next sync."""

    repo_alias: str
    asset_path: str
    server_name: str

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.repo_alias, self.asset_path, self.server_name)

    @property
    def bundle_filename(self) -> str:
        return self.asset_path.rsplit("/", 1)[-1]


class RegistryState(StoreModel):
    """Sources, selections and staged MCP servers as stored in config.json."""

    repositories: list[Source] = Field(default_factory=list)
    selections: list[Selection] = Field(default_factory=list)
    staged_mcp: list[StagedMcpServer] = Field(default_factory=list)

    @staticmethod
    def empty() -> "RegistryState":
        return RegistryState(repositories=[], selections=[], staged_mcp=[])

    def find_source(self, alias: str) -> Source | None:
        for source in self.repositories:
            if source.alias == alias:
                return source
        return None

    def aliases(self) -> set[str]:
        return {source.alias for source in self.repositories}

    def to_json_dict(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)
