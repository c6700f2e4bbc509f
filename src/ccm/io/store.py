"""Registry store I/O.

The registry is one JSON document (config.json) holding repositories, selections
and stagedMcp. It is read whole and written whole; there are no partial writes.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ccm.io.migration import migrate_legacy_aliases, normalize_raw_state
from ccm.models.source import Source
from ccm.models.state import RegistryState, Selection, StagedMcpServer

logger = logging.getLogger(__name__)

_SOURCE_ADAPTER: TypeAdapter[Source] = TypeAdapter(Source)


def _validate_records(normalized: dict[str, list[dict[str, Any]]]) -> RegistryState:
    """Validate records one by one, dropping those that cannot be read."""
    repositories: list[Source] = []
    for record in normalized["repositories"]:
        try:
            repositories.append(_SOURCE_ADAPTER.validate_python(record))
        except ValidationError as e:
            logger.warning("Skipping unreadable repository record: %s", e)

    selections: list[Selection] = []
    for record in normalized["selections"]:
        try:
            selections.append(Selection.model_validate(record))
        except ValidationError as e:
            logger.warning("Skipping unreadable selection record: %s", e)

    staged: list[StagedMcpServer] = []
    for record in normalized["stagedMcp"]:
        try:
            staged.append(StagedMcpServer.model_validate(record))
        except ValidationError as e:
            logger.warning("Skipping unreadable staged MCP record: %s", e)

    return RegistryState(repositories=repositories, selections=selections, staged_mcp=staged)


def parse_state(raw: Any, sources_dir: Path) -> tuple[RegistryState, bool]:
    """Turn a parsed store document into the current RegistryState.

    Returns:
        Tuple of (state, whether legacy aliases were migrated)
    """
    state = _validate_records(normalize_raw_state(raw))
    return migrate_legacy_aliases(state, sources_dir)


class RegistryStore(ABC):
    """Abstract interface for loading and saving the registry document.

    Enables in-memory implementations for tests that do not need the store on disk.
    """

    @abstractmethod
    def load(self) -> RegistryState:
        """Load the registry.

        Missing or unparsable documents load as an empty registry.
        """
        ...

    @abstractmethod
    def save(self, state: RegistryState) -> None:
        """Replace the stored registry with state.

        Raises:
            OSError: If the document cannot be written
        """
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path of the store (for messages and debugging)."""
        ...


class FilesystemRegistryStore(RegistryStore):
    """Production implementation reading and writing config.json."""

    def __init__(self, store_path: Path, sources_dir: Path) -> None:
        """Initialize the store.

        Args:
            store_path: Location of config.json
            sources_dir: Cache root that legacy alias migration renames directories in
        """
        self._store_path = store_path
        self._sources_dir = sources_dir

    def load(self) -> RegistryState:
        if not self._store_path.exists():
            return RegistryState.empty()

        try:
            raw = json.loads(self._store_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable registry at %s: %s", self._store_path, e)
            return RegistryState.empty()

        state, migrated = parse_state(raw, self._sources_dir)
        if migrated:
            self.save(state)
        return state

    def save(self, state: RegistryState) -> None:
        self._store_path.parent.mkdir(parents=True, exist_ok=True)

        temp_path = self._store_path.with_suffix(".json.tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(state.to_json_dict(), f, indent=2)
            f.write("\n")

        temp_path.replace(self._store_path)

    def path(self) -> Path:
        return self._store_path


class InMemoryRegistryStore(RegistryStore):
    """Test implementation holding the document in memory.

    The document round-trips through JSON-compatible dicts so tests exercise the
    same normalization and migration as the filesystem store.
    """

    def __init__(
        self, document: dict[str, Any] | None = None, sources_dir: Path | None = None
    ) -> None:
        self._document = document
        self._sources_dir = sources_dir if sources_dir is not None else Path("/fake/ccm/repos")
        self._save_count = 0

    @property
    def document(self) -> dict[str, Any] | None:
        """Last saved document. This property is for test assertions only."""
        return self._document

    @property
    def save_count(self) -> int:
        return self._save_count

    def load(self) -> RegistryState:
        if self._document is None:
            return RegistryState.empty()
        state, migrated = parse_state(self._document, self._sources_dir)
        if migrated:
            self.save(state)
        return state

    def save(self, state: RegistryState) -> None:
        self._document = state.to_json_dict()
        self._save_count += 1

    def path(self) -> Path:
        return Path("/fake/ccm/config.json")
