"""Git utilities for Worktree Wrangler.

This package provides git-related utilities:
- Client: runs git commands through a process runner
- Worktree: ``git worktree list --porcelain`` parsing
- Status: porcelain status and ahead/behind parsing
- Refs: file-level HEAD/gitdir reading for orphaned checkouts
"""
from __future__ import annotations

from .client import GitClient
from .refs import points_into_repository, read_gitdir_pointer, read_head_branch
from .status import GitStatusSummary, parse_status_porcelain
from .worktree import GitWorktreeEntry, parse_worktree_list

__all__ = [
    "GitClient",
    "GitStatusSummary",
    "GitWorktreeEntry",
    "parse_status_porcelain",
    "parse_worktree_list",
    "points_into_repository",
    "read_gitdir_pointer",
    "read_head_branch",
]
