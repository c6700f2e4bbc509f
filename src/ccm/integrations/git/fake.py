"""Fake Git operations for testing.

FakeGit is an in-memory description of remote repositories that writes real
files when a repository is cloned, so detection and linking run against an
actual directory tree.
"""

import shutil
from pathlib import Path

from ccm.integrations.git.abc import Git


def write_tree(root: Path, files: dict[str, str]) -> None:
    """Write files (relative path -> content) below root."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty dicts).
    """

    def __init__(
        self,
        *,
        remotes: dict[str, dict[str, str]] | None = None,
        refreshed_remotes: dict[str, dict[str, str]] | None = None,
        failing_urls: set[str] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured remote contents.

        Args:
            remotes: Mapping of clone URL -> files (relative path -> content)
            refreshed_remotes: Mapping of clone URL -> files that replace the
                working tree on refresh
            failing_urls: URLs whose clone and refresh raise RuntimeError
        """
        self._remotes = remotes or {}
        self._refreshed_remotes = refreshed_remotes or {}
        self._failing_urls = failing_urls or set()
        self._cloned: dict[Path, str] = {}
        self._clone_calls: list[tuple[str, Path]] = []
        self._refresh_calls: list[Path] = []

    @property
    def clone_calls(self) -> list[tuple[str, Path]]:
        """Get the list of clone() calls that were made.

        This property is for test assertions only.
        """
        return self._clone_calls

    @property
    def refresh_calls(self) -> list[Path]:
        """Get the list of refresh() calls that were made.

        This property is for test assertions only.
        """
        return self._refresh_calls

    def clone(self, url: str, destination: Path) -> None:
        self._clone_calls.append((url, destination))
        if url in self._failing_urls or url not in self._remotes:
            raise RuntimeError(f"Failed to clone {url}")
        destination.mkdir(parents=True, exist_ok=False)
        write_tree(destination, self._remotes[url])
        self._cloned[destination] = url

    def refresh(self, repo_dir: Path) -> None:
        self._refresh_calls.append(repo_dir)
        url = self._cloned.get(repo_dir)
        if url is None or url in self._failing_urls:
            raise RuntimeError(f"Failed to refresh {repo_dir}")
        if url not in self._refreshed_remotes:
            return
        shutil.rmtree(repo_dir)
        repo_dir.mkdir(parents=True)
        write_tree(repo_dir, self._refreshed_remotes[url])
