"""Input validation utilities."""
from __future__ import annotations

import os
import re
import stat
from pathlib import Path

from .paths import expand_tilde

_PROJECT_NAME_RE = re.compile(r"[A-Za-z0-9._-]+")
_WORKTREE_SEGMENT_RE = re.compile(r"[A-Za-z0-9._-]+")


def _is_dot_segment(segment: str) -> bool:
    return segment in {".", ".."}


def is_valid_project_name(name: str) -> bool:
    """Project names are alphanumeric with dots, hyphens and underscores."""
    if not name:
        return False
    if _is_dot_segment(name):
        return False
    return bool(_PROJECT_NAME_RE.fullmatch(name))


def is_valid_worktree_name(name: str) -> bool:
    """Worktree names follow project-name syntax plus one ``/`` for user/branch naming."""
    if not name:
        return False
    segments = name.split("/")
    if len(segments) > 2:
        return False
    for segment in segments:
        if not segment or _is_dot_segment(segment):
            return False
        if not _WORKTREE_SEGMENT_RE.fullmatch(segment):
            return False
    return True


_BRANCH_FORBIDDEN_RE = re.compile(r"[\s\x00-\x1f\x7f~^:?*\[\\@]|\.\.|//|/\.|\.lock$|^[-/.]|[/.]$")


def is_valid_branch_name(name: str) -> bool:
    """Conservative subset of git's ref-name rules, checked without running git."""
    if not name:
        return False
    return not _BRANCH_FORBIDDEN_RE.search(name)


def is_executable(path: str | Path) -> bool:
    """Return True for an existing regular file with an execute bit set."""
    try:
        p = expand_tilde(path)
        st = p.stat()
    except OSError:
        return False
    if not stat.S_ISREG(st.st_mode):
        return False
    return bool(st.st_mode & 0o111) and os.access(p, os.X_OK)


__all__ = [
    "is_valid_project_name",
    "is_valid_worktree_name",
    "is_valid_branch_name",
    "is_executable",
]
