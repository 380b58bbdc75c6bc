"""Worktree records shared by the resolver, inventory, history and engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from worktree_wrangler.core.exceptions import WranglerError
from worktree_wrangler.core.utils.subprocess import ExecResult

# Script Runner results are plain process results.
ExecOutcome = ExecResult


class WorktreeLayout(str, Enum):
    """On-disk naming scheme of a worktree directory."""

    LEGACY = "legacy"  # <worktrees_dir>/<worktree>
    STANDARD = "standard"  # <worktrees_dir>/<project>-<worktree>
    NESTED = "nested"  # <worktrees_dir>/<project>/<worktree>


@dataclass(frozen=True)
class WorktreeLocation:
    """Resolved address of a worktree. Never persisted."""

    project: str
    worktree: str
    path: Path
    layout: WorktreeLayout


@dataclass(frozen=True)
class WorktreeStatus:
    clean: bool = True
    modified_files: int = 0
    ahead: int = 0
    behind: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clean": self.clean,
            "modified_files": self.modified_files,
            "ahead": self.ahead,
            "behind": self.behind,
        }


@dataclass(frozen=True)
class WorktreeInfo:
    """Advisory snapshot of one worktree, recomputed on every query."""

    name: str
    path: Path
    project: str
    branch: Optional[str]
    status: Optional[WorktreeStatus]
    last_activity: Optional[datetime]
    orphaned: bool = False
    layout: Optional[WorktreeLayout] = None
    head: Optional[str] = None
    prunable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": str(self.path),
            "project": self.project,
            "branch": self.branch,
            "status": self.status.to_dict() if self.status else None,
            "last_activity": self.last_activity.isoformat() if self.last_activity else None,
            "orphaned": self.orphaned,
            "layout": self.layout.value if self.layout else None,
            "head": self.head,
        }


@dataclass(frozen=True)
class RecentEntry:
    timestamp: datetime
    project: str
    worktree: str
    exists: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "project": self.project,
            "worktree": self.worktree,
            "exists": self.exists,
        }


@dataclass(frozen=True)
class CleanupCandidate:
    info: WorktreeInfo
    reasons: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"worktree": self.info.name, "path": str(self.info.path), "reasons": list(self.reasons)}


@dataclass
class CleanupReport:
    """Outcome of a cleanup pass. ``failed`` pairs a worktree name with its error."""

    candidates: List[CleanupCandidate] = field(default_factory=list)
    succeeded: List[str] = field(default_factory=list)
    failed: List[Tuple[str, WranglerError]] = field(default_factory=list)
    dry_run: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dry_run": self.dry_run,
            "candidates": [c.to_dict() for c in self.candidates],
            "succeeded": list(self.succeeded),
            "failed": [{"worktree": name, "error": err.to_json_error()} for name, err in self.failed],
        }


__all__ = [
    "ExecOutcome",
    "WorktreeLayout",
    "WorktreeLocation",
    "WorktreeStatus",
    "WorktreeInfo",
    "RecentEntry",
    "CleanupCandidate",
    "CleanupReport",
]
