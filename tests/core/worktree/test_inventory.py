from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from worktree_wrangler.core.context import WranglerContext
from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.git import GitClient
from worktree_wrangler.core.worktree import WorktreeInventory, WorktreeLayout
from helpers.git_helpers import git_create_worktree, git_init, git_commit, make_orphan
from helpers.runners import SpyRunner, result

pytestmark = pytest.mark.requires_git


def _names(infos):  # type: ignore[no-untyped-def]
    return sorted(i.name for i in infos)


def test_lists_registered_worktrees_excluding_primary(ctx: WranglerContext, acme_repo: Path) -> None:
    wt = ctx.config.worktrees_dir
    git_create_worktree(acme_repo, wt / "acme-feature-x", "feature-x")
    git_create_worktree(acme_repo, wt / "acme" / "nested-one", "nested-one")

    infos = ctx.inventory.list("acme")

    assert _names(infos) == ["feature-x", "nested-one"]
    by_name = {i.name: i for i in infos}
    assert by_name["feature-x"].branch == "feature-x"
    assert by_name["feature-x"].layout is WorktreeLayout.STANDARD
    assert by_name["nested-one"].layout is WorktreeLayout.NESTED
    assert not any(i.orphaned for i in infos)
    assert by_name["feature-x"].status is not None and by_name["feature-x"].status.clean
    assert by_name["feature-x"].last_activity is not None


def test_orphaned_directory_is_flagged(ctx: WranglerContext, acme_repo: Path) -> None:
    wt = ctx.config.worktrees_dir
    path = git_create_worktree(acme_repo, wt / "acme-stale", "stale")
    make_orphan(acme_repo, path)

    infos = ctx.inventory.list("acme")

    assert _names(infos) == ["stale"]
    assert infos[0].orphaned is True
    # HEAD lived in the deleted admin directory.
    assert infos[0].branch is None


def test_other_projects_and_clones_are_ignored(ctx: WranglerContext, acme_repo: Path) -> None:
    wt = ctx.config.worktrees_dir
    other = ctx.config.projects_dir / "other"
    other.mkdir()
    git_init(other)
    (other / "f").write_text("x", encoding="utf-8")
    git_commit(other, "init")
    git_create_worktree(other, wt / "other-thing", "thing")
    # A standalone clone in legacy position belongs to nobody.
    clone = wt / "loose"
    clone.mkdir()
    git_init(clone)

    assert ctx.inventory.list("acme") == []
    assert _names(ctx.inventory.list("other")) == ["thing"]


def test_legacy_layout_worktree_is_listed(ctx: WranglerContext, acme_repo: Path) -> None:
    git_create_worktree(acme_repo, ctx.config.worktrees_dir / "oldstyle", "oldstyle")

    [info] = ctx.inventory.list("acme")

    assert info.name == "oldstyle"
    assert info.layout is WorktreeLayout.LEGACY


def test_slash_names_are_found_in_registry_and_scan(ctx: WranglerContext, acme_repo: Path) -> None:
    wt = ctx.config.worktrees_dir
    path = git_create_worktree(acme_repo, wt / "acme-bob" / "topic", "bob/topic")

    [info] = ctx.inventory.list("acme")
    assert info.name == "bob/topic"

    make_orphan(acme_repo, path)
    [info] = ctx.inventory.list("acme")
    assert info.name == "bob/topic"
    assert info.orphaned is True


def test_sorted_by_last_activity_then_name(
    ctx: WranglerContext, acme_repo: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    wt = ctx.config.worktrees_dir
    for name in ("b", "a", "c"):
        git_create_worktree(acme_repo, wt / f"acme-{name}", name)
    # Same base commit everywhere; a later commit on "c" puts it first.
    monkeypatch.setenv("GIT_COMMITTER_DATE", "2099-01-01T00:00:00+00:00")
    (wt / "acme-c" / "new.txt").write_text("x", encoding="utf-8")
    git_commit(wt / "acme-c", "newer")

    infos = ctx.inventory.list("acme")

    assert infos[0].name == "c"
    assert [i.name for i in infos[1:]] == ["a", "b"]


def test_git_failure_falls_back_to_scan_without_orphans(ctx: WranglerContext, acme_repo: Path) -> None:
    path = git_create_worktree(acme_repo, ctx.config.worktrees_dir / "acme-x", "x")
    spy = SpyRunner({"git worktree": result(stderr="fatal: boom", exit_code=128)})
    inventory = WorktreeInventory(GitClient(spy), ctx.resolver, ctx.projects)

    [info] = inventory.list("acme")

    assert info.name == "x"
    assert info.path == path
    assert info.orphaned is False
    assert inventory.registered_paths("acme") is None


def test_get_resolves_and_missing_raises(ctx: WranglerContext, acme_repo: Path) -> None:
    git_create_worktree(acme_repo, ctx.config.worktrees_dir / "acme-x", "x")

    assert ctx.inventory.get("acme", "x").branch == "x"
    with pytest.raises(WranglerError) as exc:
        ctx.inventory.get("acme", "missing")
    assert exc.value.kind is ErrorKind.WORKTREE_NOT_FOUND


def test_deleted_directory_is_reported_prunable(ctx: WranglerContext, acme_repo: Path) -> None:
    path = git_create_worktree(acme_repo, ctx.config.worktrees_dir / "acme-gone", "gone")
    shutil.rmtree(path)

    [info] = ctx.inventory.list("acme")

    assert info.prunable is True
    assert info.status is None
    assert info.last_activity is None


def test_unknown_project_raises(ctx: WranglerContext) -> None:
    with pytest.raises(WranglerError) as exc:
        ctx.inventory.list("nope")
    assert exc.value.kind is ErrorKind.PROJECT_NOT_FOUND
