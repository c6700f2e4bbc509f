"""Alias allocation for registered sources.

Aliases use the owner.repo form ("acmefoo/claude-kit" -> "acmefoo.claude-kit").
Earlier releases issued truncated aliases of up to four letters ("acme", "acme2");
is_legacy_alias recognizes those so the store can migrate them on load.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ccm.registry import SourceRegistry

LEGACY_ALIAS_PATTERN = re.compile(r"^[a-z]{1,4}\d*$")

_GITHUB_URL_PATTERN = re.compile(
    r"github\.com[/:]([^/]+)/([^/\s]+?)(?:\.git)?(?:/|$)", re.IGNORECASE
)
_SHORTHAND_PATTERN = re.compile(r"^([^/\s:]+)/([^/\s]+)$")


@dataclass(frozen=True)
class GitHubIdentity:
    """Owner and repository name of a GitHub source."""

    owner: str
    repo: str

    @property
    def clone_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"


def base_alias(owner: str, repo: str) -> str:
    return f"{owner.lower()}.{repo.lower()}"


def resolve_collision(base: str, taken: Iterable[str]) -> str:
    """Return base, or base followed by the smallest integer >= 2 not in taken."""
    taken_set = set(taken)
    if base not in taken_set:
        return base

    counter = 2
    while f"{base}{counter}" in taken_set:
        counter += 1
    return f"{base}{counter}"


def generate_alias(registry: "SourceRegistry", owner: str, repo: str) -> str:
    """Generate a unique alias for a GitHub source.

    Reads the registry at call time so sources registered since the caller last
    looked are taken into account.
    """
    existing = {source.alias for source in registry.list_sources()}
    return resolve_collision(base_alias(owner, repo), existing)


def generate_local_alias(registry: "SourceRegistry", directory: Path) -> str:
    """Generate a unique alias for a local directory source from its name."""
    existing = {source.alias for source in registry.list_sources()}
    base = re.sub(r"[^a-z0-9._-]+", "-", directory.name.lower()).strip("-") or "local"
    return resolve_collision(base, existing)


def is_legacy_alias(alias: str) -> bool:
    """Check whether an alias uses the old truncated format (1-4 letters, optional digits)."""
    if "." in alias:
        return False
    return LEGACY_ALIAS_PATTERN.match(alias) is not None


def parse_github_url(url: str) -> GitHubIdentity | None:
    """Extract owner and repo from a GitHub URL or owner/repo shorthand.

    Accepts https, http, git@ and scheme-less forms, with or without a .git
    suffix, trailing /tree/... or /blob/... segments, query string or fragment.

    Returns:
        GitHubIdentity, or None when the input is not recognizable
    """
    clean = url.split("?", 1)[0].split("#", 1)[0].strip()

    match = _GITHUB_URL_PATTERN.search(clean)
    if match is None:
        match = _SHORTHAND_PATTERN.match(clean)
    if match is None:
        return None

    owner = match.group(1)
    repo = match.group(2).removesuffix(".git")
    if not owner or not repo:
        return None
    return GitHubIdentity(owner=owner, repo=repo)


def namespaced_name(alias: str, name: str) -> str:
    """Prefix an asset name with its source alias ("coder.md" -> "acme.kit-coder.md")."""
    return f"{alias}-{name}"
