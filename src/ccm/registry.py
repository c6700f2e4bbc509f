"""Source registry operations over a RegistryStore.

Each operation loads the whole document, applies one change and saves it back.
Lookups that find nothing return None rather than raising.
"""

from typing import Any

from ccm.io.store import RegistryStore
from ccm.models.source import Source
from ccm.models.state import RegistryState, Selection, StagedMcpServer


class SourceRegistry:
    """Persisted sources, selections and staged MCP servers."""

    def __init__(self, store: RegistryStore) -> None:
        self._store = store

    @property
    def store(self) -> RegistryStore:
        return self._store

    def load(self) -> RegistryState:
        return self._store.load()

    # Sources

    def add_source(self, source: Source) -> None:
        """Insert a source, replacing any source with the same alias.

        Callers guarantee alias uniqueness (see ccm.alias).
        """
        state = self._store.load()
        repositories = list(state.repositories)
        for index, existing in enumerate(repositories):
            if existing.alias == source.alias:
                repositories[index] = source
                break
        else:
            repositories.append(source)
        self._store.save(state.model_copy(update={"repositories": repositories}))

    def remove_source(self, alias: str) -> Source | None:
        """Remove a source with its selections and staged servers.

        On-disk links are the caller's concern (see ccm.sources.remove_source).

        Returns:
            The removed source, or None if no source has that alias
        """
        state = self._store.load()
        removed = state.find_source(alias)
        if removed is None:
            return None

        self._store.save(
            RegistryState(
                repositories=[s for s in state.repositories if s.alias != alias],
                selections=[s for s in state.selections if s.repo_alias != alias],
                staged_mcp=[s for s in state.staged_mcp if s.repo_alias != alias],
            )
        )
        return removed

    def get_source(self, alias: str) -> Source | None:
        return self._store.load().find_source(alias)

    def list_sources(self) -> list[Source]:
        return list(self._store.load().repositories)

    def update_source(self, alias: str, **fields: Any) -> Source | None:
        """Merge fields into an existing source.

        Args:
            alias: Alias of the source to update
            **fields: Attribute names and new values (e.g. assets=..., updated_at=...)

        Returns:
            The updated source, or None if no source has that alias
        """
        state = self._store.load()
        repositories = list(state.repositories)
        for index, existing in enumerate(repositories):
            if existing.alias == alias:
                updated = existing.model_copy(update=fields)
                repositories[index] = updated
                self._store.save(state.model_copy(update={"repositories": repositories}))
                return updated
        return None

    # Selections

    def add_selection(self, selection: Selection) -> None:
        """Insert a selection, replacing any selection with the same key."""
        state = self._store.load()
        selections = list(state.selections)
        for index, existing in enumerate(selections):
            if existing.key == selection.key:
                selections[index] = selection
                break
        else:
            selections.append(selection)
        self._store.save(state.model_copy(update={"selections": selections}))

    def remove_selection(self, repo_alias: str, asset_path: str) -> Selection | None:
        state = self._store.load()
        key = (repo_alias, asset_path)
        for existing in state.selections:
            if existing.key == key:
                remaining = [s for s in state.selections if s.key != key]
                self._store.save(state.model_copy(update={"selections": remaining}))
                return existing
        return None

    def list_selections(self) -> list[Selection]:
        return list(self._store.load().selections)

    def list_selections_for_source(self, alias: str) -> list[Selection]:
        return [s for s in self._store.load().selections if s.repo_alias == alias]

    # Staged MCP servers

    def stage_entry(self, repo_alias: str, asset_path: str, server_name: str) -> bool:
        """Stage one server of an MCP bundle.

        Returns:
            True if newly staged, False if it was already staged
        """
        state = self._store.load()
        entry = StagedMcpServer(
            repo_alias=repo_alias, asset_path=asset_path, server_name=server_name
        )
        if any(existing.key == entry.key for existing in state.staged_mcp):
            return False
        self._store.save(state.model_copy(update={"staged_mcp": [*state.staged_mcp, entry]}))
        return True

    def unstage_entry(self, repo_alias: str, asset_path: str, server_name: str) -> bool:
        """Unstage one server.

        Returns:
            True if it was staged, False otherwise
        """
        state = self._store.load()
        key = (repo_alias, asset_path, server_name)
        remaining = [s for s in state.staged_mcp if s.key != key]
        if len(remaining) == len(state.staged_mcp):
            return False
        self._store.save(state.model_copy(update={"staged_mcp": remaining}))
        return True

    def list_staged_entries(self) -> list[StagedMcpServer]:
        return list(self._store.load().staged_mcp)

    def list_staged_entries_for(self, repo_alias: str, asset_path: str) -> list[str]:
        """Return the staged server names of one bundle."""
        return [
            s.server_name
            for s in self._store.load().staged_mcp
            if s.repo_alias == repo_alias and s.asset_path == asset_path
        ]

    def clear_staged_entries(self) -> None:
        state = self._store.load()
        self._store.save(state.model_copy(update={"staged_mcp": []}))
