"""Worktree resolution and lifecycle.

Modules (leaf first):
- resolver: project/worktree names to directories across the three layouts
- inventory: git registry listing plus disk scan, orphan detection
- history: the ``recent`` visit log
- scripts: per-repository setup/archive scripts
- engine: create/remove/cleanup/visit returning ``Result`` values
"""
from __future__ import annotations

from .engine import WorktreeEngine
from .history import RecentHistory
from .inventory import WorktreeInventory
from .models import (
    CleanupCandidate,
    CleanupReport,
    ExecOutcome,
    RecentEntry,
    WorktreeInfo,
    WorktreeLayout,
    WorktreeLocation,
    WorktreeStatus,
)
from .resolver import PathResolver, validate_names
from .scripts import ScriptRunner, script_env

__all__ = [
    "WorktreeEngine",
    "RecentHistory",
    "WorktreeInventory",
    "PathResolver",
    "ScriptRunner",
    "script_env",
    "validate_names",
    "CleanupCandidate",
    "CleanupReport",
    "ExecOutcome",
    "RecentEntry",
    "WorktreeInfo",
    "WorktreeLayout",
    "WorktreeLocation",
    "WorktreeStatus",
]
