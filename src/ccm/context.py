"""Application context with dependency injection.

The CcmContext dataclass holds all dependencies (environment, registry, git) and
is created once at CLI entry point, then threaded through the application.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ccm.integrations.git.abc import Git
from ccm.io.store import FilesystemRegistryStore, RegistryStore
from ccm.linking import LinkManager
from ccm.paths import CcmEnvironment
from ccm.registry import SourceRegistry
from ccm.staging import McpStager

DEBUG_ENV = "CCM_DEBUG"


@dataclass(frozen=True)
class CcmContext:
    """Immutable context holding all dependencies for ccm operations.

    Created at CLI entry point via create_context() and threaded through the
    application via Click's context system.

    Attributes:
        env: Filesystem roots for the store, source cache and link targets
        registry: Persisted sources, selections and staged MCP servers
        git: Git operations used to clone and refresh GitHub sources
        debug: Debug flag for error handling (full stack traces)
    """

    env: CcmEnvironment
    registry: SourceRegistry
    git: Git
    debug: bool

    @property
    def links(self) -> LinkManager:
        return LinkManager(self.env, self.registry)

    @property
    def stager(self) -> McpStager:
        return McpStager(self.env, self.registry)

    @staticmethod
    def for_test(
        home: Path,
        git: Git | None = None,
        store: RegistryStore | None = None,
        debug: bool = False,
    ) -> "CcmContext":
        """Create test context rooted at home with optional pre-configured implementations.

        Args:
            home: Directory standing in for the user's home (usually tmp_path)
            git: Optional Git implementation. If None, creates an empty FakeGit.
            store: Optional RegistryStore. If None, uses a FilesystemRegistryStore below home.
            debug: Whether to enable debug mode (default False).
        """
        from ccm.integrations.git.fake import FakeGit

        env = CcmEnvironment.for_home(home)
        resolved_store: RegistryStore = (
            store
            if store is not None
            else FilesystemRegistryStore(env.store_path, env.sources_dir)
        )
        resolved_git: Git = git if git is not None else FakeGit()

        return CcmContext(
            env=env,
            registry=SourceRegistry(resolved_store),
            git=resolved_git,
            debug=debug,
        )


def configure_logging(debug: bool) -> None:
    """Enable debug logging when requested or when CCM_DEBUG is set."""
    if debug or os.environ.get(DEBUG_ENV):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")


def create_context(*, debug: bool) -> CcmContext:
    """Create production context with real implementations.

    Called once at CLI entry point to create the context for the entire
    command execution.
    """
    from ccm.integrations.git.real import RealGit

    configure_logging(debug)
    env = CcmEnvironment.from_env()
    store = FilesystemRegistryStore(env.store_path, env.sources_dir)

    return CcmContext(
        env=env,
        registry=SourceRegistry(store),
        git=RealGit(),
        debug=debug,
    )
