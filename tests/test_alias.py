"""Tests for alias allocation and GitHub URL parsing."""

from pathlib import Path

import pytest

from ccm.alias import (
    base_alias,
    generate_alias,
    generate_local_alias,
    is_legacy_alias,
    namespaced_name,
    parse_github_url,
    resolve_collision,
)
from ccm.io.store import InMemoryRegistryStore
from ccm.models.source import GitHubSource
from ccm.registry import SourceRegistry


def _github_source(alias: str, owner: str, repo: str) -> GitHubSource:
    return GitHubSource(
        alias=alias,
        url=f"https://github.com/{owner}/{repo}",
        owner=owner,
        repo=repo,
        local_path=Path(f"/cache/{alias}"),
    )


def test_base_alias_lowercases_owner_and_repo() -> None:
    assert base_alias("AcmeFoo", "Claude-Kit") == "acmefoo.claude-kit"


def test_resolve_collision_returns_base_when_free() -> None:
    assert resolve_collision("acme.kit", {"other"}) == "acme.kit"


def test_resolve_collision_appends_smallest_free_suffix() -> None:
    assert resolve_collision("acme.kit", {"acme.kit"}) == "acme.kit2"
    assert resolve_collision("acme.kit", {"acme.kit", "acme.kit2", "acme.kit3"}) == "acme.kit4"


def test_resolve_collision_fills_gaps() -> None:
    assert resolve_collision("acme.kit", {"acme.kit", "acme.kit3"}) == "acme.kit2"


def test_generate_alias_reads_registry() -> None:
    registry = SourceRegistry(InMemoryRegistryStore())
    assert generate_alias(registry, "acmefoo", "claude-kit") == "acmefoo.claude-kit"

    registry.add_source(_github_source("acmefoo.claude-kit", "acmefoo", "claude-kit"))
    assert generate_alias(registry, "AcmeFoo", "Claude-Kit") == "acmefoo.claude-kit2"


def test_generate_local_alias_uses_directory_name() -> None:
    registry = SourceRegistry(InMemoryRegistryStore())
    assert generate_local_alias(registry, Path("/home/me/My Kit")) == "my-kit"


@pytest.mark.parametrize("alias", ["a", "acme", "acme2", "ab12"])
def test_is_legacy_alias_matches_truncated_aliases(alias: str) -> None:
    assert is_legacy_alias(alias)


@pytest.mark.parametrize("alias", ["acmefoo", "acme.kit", "Acme", "acme-2", "", "2acme"])
def test_is_legacy_alias_rejects_current_aliases(alias: str) -> None:
    assert not is_legacy_alias(alias)


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/acmefoo/claude-kit",
        "https://github.com/acmefoo/claude-kit.git",
        "https://github.com/acmefoo/claude-kit/",
        "https://github.com/acmefoo/claude-kit/tree/main/agents",
        "https://github.com/acmefoo/claude-kit?tab=readme",
        "http://github.com/acmefoo/claude-kit",
        "git@github.com:acmefoo/claude-kit.git",
        "github.com/acmefoo/claude-kit",
        "acmefoo/claude-kit",
    ],
)
def test_parse_github_url_accepts_common_forms(url: str) -> None:
    identity = parse_github_url(url)

    assert identity is not None
    assert identity.owner == "acmefoo"
    assert identity.repo == "claude-kit"
    assert identity.clone_url == "https://github.com/acmefoo/claude-kit"


@pytest.mark.parametrize("url", ["", "not a url", "https://gitlab.com/acme", "acmefoo"])
def test_parse_github_url_rejects_unrecognized_input(url: str) -> None:
    assert parse_github_url(url) is None


def test_namespaced_name_prefixes_alias() -> None:
    assert namespaced_name("acme.kit", "coder.md") == "acme.kit-coder.md"
