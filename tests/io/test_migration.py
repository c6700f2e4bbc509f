"""Tests for legacy alias migration on load."""

import json
from pathlib import Path

from ccm.io.migration import migrate_legacy_aliases, normalize_raw_state
from ccm.io.store import FilesystemRegistryStore
from ccm.models.source import GitHubSource, LocalSource
from ccm.models.state import RegistryState, Selection, StagedMcpServer


def _legacy_source(alias: str, owner: str, repo: str, sources_dir: Path) -> GitHubSource:
    return GitHubSource(
        alias=alias,
        url=f"https://github.com/{owner}/{repo}",
        owner=owner,
        repo=repo,
        local_path=sources_dir / alias,
    )


def test_normalize_handles_non_object_documents() -> None:
    assert normalize_raw_state(None) == {"repositories": [], "selections": [], "stagedMcp": []}
    assert normalize_raw_state("text") == {"repositories": [], "selections": [], "stagedMcp": []}


def test_current_aliases_are_left_alone(tmp_path: Path) -> None:
    source = _legacy_source("acmefoo.claude-kit", "acmefoo", "claude-kit", tmp_path)
    state = RegistryState(repositories=[source])

    migrated, changed = migrate_legacy_aliases(state, tmp_path)

    assert not changed
    assert migrated is state


def test_local_sources_are_never_migrated(tmp_path: Path) -> None:
    source = LocalSource(alias="kit", local_path=tmp_path / "kit")
    state = RegistryState(repositories=[source])

    _, changed = migrate_legacy_aliases(state, tmp_path)

    assert not changed


def test_legacy_alias_is_rewritten_with_references(tmp_path: Path) -> None:
    sources_dir = tmp_path / "repos"
    (sources_dir / "acme").mkdir(parents=True)
    (sources_dir / "acme" / "agents").mkdir()
    (sources_dir / "acme" / "agents" / "a.md").write_text("x", encoding="utf-8")

    agents_dir = tmp_path / "claude" / "agents"
    agents_dir.mkdir(parents=True)
    old_link = agents_dir / "acme-a.md"
    old_link.symlink_to(sources_dir / "acme" / "agents" / "a.md")

    state = RegistryState(
        repositories=[_legacy_source("acme", "AcmeFoo", "Claude-Kit", sources_dir)],
        selections=[
            Selection(
                repo_alias="acme", asset_path="agents/a.md", type="agent", linked_path=old_link
            )
        ],
        staged_mcp=[StagedMcpServer(repo_alias="acme", asset_path="mcp.json", server_name="gh")],
    )

    migrated, changed = migrate_legacy_aliases(state, sources_dir)

    assert changed
    source = migrated.repositories[0]
    assert source.alias == "acmefoo.claude-kit"
    assert source.local_path == sources_dir / "acmefoo.claude-kit"
    assert (sources_dir / "acmefoo.claude-kit" / "agents" / "a.md").exists()
    assert not (sources_dir / "acme").exists()

    selection = migrated.selections[0]
    new_link = agents_dir / "acmefoo.claude-kit-a.md"
    assert selection.repo_alias == "acmefoo.claude-kit"
    assert selection.linked_path == new_link
    assert new_link.is_symlink()
    assert new_link.resolve() == (sources_dir / "acmefoo.claude-kit" / "agents" / "a.md").resolve()
    assert not old_link.is_symlink()

    assert migrated.staged_mcp[0].repo_alias == "acmefoo.claude-kit"


def test_migrated_alias_avoids_existing_aliases(tmp_path: Path) -> None:
    state = RegistryState(
        repositories=[
            _legacy_source("acmefoo.kit", "acmefoo", "kit", tmp_path),
            _legacy_source("acme", "acmefoo", "kit", tmp_path),
        ]
    )

    migrated, changed = migrate_legacy_aliases(state, tmp_path)

    assert changed
    assert [s.alias for s in migrated.repositories] == ["acmefoo.kit", "acmefoo.kit2"]


def test_existing_new_directory_is_adopted(tmp_path: Path) -> None:
    (tmp_path / "acme").mkdir()
    (tmp_path / "acmefoo.kit").mkdir()
    state = RegistryState(repositories=[_legacy_source("acme", "acmefoo", "kit", tmp_path)])

    migrated, _ = migrate_legacy_aliases(state, tmp_path)

    assert migrated.repositories[0].local_path == tmp_path / "acmefoo.kit"
    assert (tmp_path / "acme").exists()


def test_filesystem_store_persists_migration(tmp_path: Path) -> None:
    store_path = tmp_path / "config.json"
    sources_dir = tmp_path / "repos"
    document = {
        "repositories": [
            {
                "alias": "acme",
                "url": "https://github.com/acmefoo/kit",
                "owner": "acmefoo",
                "repo": "kit",
                "localPath": str(sources_dir / "acme"),
            }
        ],
        "selections": [],
        "stagedMcp": [],
    }
    store_path.write_text(json.dumps(document), encoding="utf-8")

    state = FilesystemRegistryStore(store_path, sources_dir).load()

    assert state.repositories[0].alias == "acmefoo.kit"
    saved = json.loads(store_path.read_text(encoding="utf-8"))
    assert saved["repositories"][0]["alias"] == "acmefoo.kit"
    assert saved["repositories"][0]["registryType"] == "github"
