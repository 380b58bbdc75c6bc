"""Git worktree registry parsing."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class GitWorktreeEntry:
    """One record of ``git worktree list --porcelain``."""

    path: Path
    head: Optional[str] = None
    branch: Optional[str] = None
    branch_ref: Optional[str] = None
    bare: bool = False
    detached: bool = False
    locked: bool = False
    prunable: bool = False


def _parse_worktree_records(stdout: str) -> List[Dict[str, Any]]:
    """Parse ``git worktree list --porcelain`` output into raw dicts."""
    worktrees: List[Dict[str, Any]] = []
    current: Dict[str, Any] = {}

    for raw in stdout.splitlines():
        line = raw.strip()
        if not line:
            if current:
                worktrees.append(current)
                current = {}
            continue

        if line.startswith("worktree "):
            if current:
                worktrees.append(current)
                current = {}
            current["path"] = line.split(" ", 1)[1]
            continue

        if line.startswith("HEAD "):
            current["head"] = line.split(" ", 1)[1]
            continue

        if line.startswith("branch "):
            ref = line.split(" ", 1)[1]
            branch = ref
            if ref.startswith("refs/heads/"):
                branch = ref[len("refs/heads/"):]
            current["branch_ref"] = ref
            current["branch"] = branch
            continue

        # Flag lines may carry a reason ("locked reason", "prunable gitdir file points ...")
        flag = line.split(" ", 1)[0]
        if flag in {"bare", "detached", "locked", "prunable"}:
            current[flag] = True

    if current:
        worktrees.append(current)

    return worktrees


def parse_worktree_list(stdout: str) -> List[GitWorktreeEntry]:
    """Parse porcelain output into :class:`GitWorktreeEntry` records."""
    entries: List[GitWorktreeEntry] = []
    for record in _parse_worktree_records(stdout):
        if "path" not in record:
            continue
        entries.append(
            GitWorktreeEntry(
                path=Path(record["path"]),
                head=record.get("head"),
                branch=record.get("branch"),
                branch_ref=record.get("branch_ref"),
                bare=bool(record.get("bare")),
                detached=bool(record.get("detached")),
                locked=bool(record.get("locked")),
                prunable=bool(record.get("prunable")),
            )
        )
    return entries


__all__ = ["GitWorktreeEntry", "parse_worktree_list"]
