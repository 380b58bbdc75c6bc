"""File-level git metadata helpers that never spawn a process.

Used for orphaned directories, where git itself may refuse to operate
because the worktree's administrative directory is gone.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from worktree_wrangler.core.utils.paths import path_within


def read_gitdir_pointer(checkout: Path) -> Optional[Path]:
    """Return the ``gitdir:`` target of a linked worktree's ``.git`` file."""
    dot_git = Path(checkout) / ".git"
    if not dot_git.is_file():
        return None
    try:
        content = dot_git.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    if not content.startswith("gitdir:"):
        return None
    target = Path(content[len("gitdir:"):].strip())
    if not target.is_absolute():
        target = (Path(checkout) / target).absolute()
    return target


def points_into_repository(checkout: Path, repo_root: Path) -> Optional[bool]:
    """True/False when the checkout's pointer targets ``repo_root``; None if unknown."""
    target = read_gitdir_pointer(checkout)
    if target is None:
        return None
    return path_within(target, Path(repo_root) / ".git")


def read_head_branch(checkout: Path) -> Optional[str]:
    """Read the checked-out branch from the worktree's HEAD file.

    Returns None for a detached HEAD or when the metadata is unreadable.
    """
    dot_git = Path(checkout) / ".git"
    if dot_git.is_dir():
        head_file = dot_git / "HEAD"
    else:
        gitdir = read_gitdir_pointer(checkout)
        if gitdir is None:
            return None
        head_file = gitdir / "HEAD"
    try:
        content = head_file.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    if content.startswith("ref: "):
        ref = content[len("ref: "):].strip()
        if ref.startswith("refs/heads/"):
            return ref[len("refs/heads/"):]
        return ref
    return None


__all__ = ["read_gitdir_pointer", "points_into_repository", "read_head_branch"]
