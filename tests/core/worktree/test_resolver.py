from __future__ import annotations

import os
from pathlib import Path

import pytest

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.worktree import PathResolver, WorktreeLayout


def _checkout(path: Path) -> Path:
    path.mkdir(parents=True)
    (path / ".git").write_text("gitdir: /nowhere\n", encoding="utf-8")
    return path


def test_standard_location_is_project_dash_name(tmp_path: Path) -> None:
    loc = PathResolver(tmp_path / "wt").standard_location("acme", "feature-x")

    assert loc.path == tmp_path / "wt" / "acme-feature-x"
    assert loc.layout is WorktreeLayout.STANDARD


def test_lookup_order_nested_then_standard_then_legacy(tmp_path: Path) -> None:
    root = tmp_path / "wt"
    resolver = PathResolver(root)

    _checkout(root / "feat")
    assert resolver.resolve("acme", "feat").layout is WorktreeLayout.LEGACY

    _checkout(root / "acme-feat")
    assert resolver.resolve("acme", "feat").layout is WorktreeLayout.STANDARD

    _checkout(root / "acme" / "feat")
    loc = resolver.resolve("acme", "feat")
    assert loc.layout is WorktreeLayout.NESTED
    assert loc.path == root / "acme" / "feat"


def test_nested_container_is_not_a_legacy_worktree(tmp_path: Path) -> None:
    root = tmp_path / "wt"
    _checkout(root / "acme" / "feat")

    # "acme" exists as a directory but is a container, not a checkout.
    assert PathResolver(root).find("other", "acme") is None


def test_missing_worktree_raises_not_found_with_names(tmp_path: Path) -> None:
    with pytest.raises(WranglerError) as exc:
        PathResolver(tmp_path).resolve("acme", "nope")

    assert exc.value.kind is ErrorKind.WORKTREE_NOT_FOUND
    assert exc.value.context == {"project": "acme", "worktree": "nope"}


def test_invalid_names_are_rejected_before_disk_access(tmp_path: Path) -> None:
    resolver = PathResolver(tmp_path)
    for project, worktree in [("acme", "../etc"), ("ac me", "x"), ("acme", "a@b")]:
        with pytest.raises(WranglerError) as exc:
            resolver.find(project, worktree)
        assert exc.value.kind is ErrorKind.INVALID_NAME


def test_symlink_escaping_root_is_invalid_location(tmp_path: Path) -> None:
    root = tmp_path / "wt"
    root.mkdir()
    outside = tmp_path / "outside"
    outside.mkdir()
    os.symlink(outside, root / "acme-escape")

    with pytest.raises(WranglerError) as exc:
        PathResolver(root).resolve("acme", "escape")

    assert exc.value.kind is ErrorKind.INVALID_LOCATION
    assert not PathResolver(root).exists("acme", "escape")


def test_user_branch_style_names_nest_one_level(tmp_path: Path) -> None:
    root = tmp_path / "wt"
    _checkout(root / "acme-bob" / "topic")

    loc = PathResolver(root).resolve("acme", "bob/topic")

    assert loc.path == root / "acme-bob" / "topic"
    assert loc.layout is WorktreeLayout.STANDARD
