"""Filesystem path helpers."""
from __future__ import annotations

from pathlib import Path

APP_NAME = "worktree-wrangler"


def expand_tilde(path: str | Path) -> Path:
    """Expand a leading ``~`` in ``path``."""
    return Path(str(path)).expanduser()


def path_within(child: Path, parent: Path) -> bool:
    """True when ``child`` is ``parent`` or below it, after resolving symlinks."""
    try:
        c = Path(child).resolve()
        p = Path(parent).resolve()
    except OSError:
        return False
    return c == p or c.is_relative_to(p)


def is_checkout(path: Path) -> bool:
    """True when ``path`` is a directory carrying a ``.git`` entry (dir or file)."""
    return path.is_dir() and (path / ".git").exists()


__all__ = [
    "APP_NAME",
    "expand_tilde",
    "path_within",
    "is_checkout",
]
