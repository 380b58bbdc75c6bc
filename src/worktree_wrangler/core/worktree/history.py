"""Recent-history log of visited worktrees.

The log lives at ``<data_dir>/recent``, one entry per line::

    2024-05-01T09:30:00+00:00|acme|feature-x

Rewrites go through :func:`atomic_write`, so a concurrent reader sees either
the old or the new file, never a truncated one.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.utils.io import atomic_write
from worktree_wrangler.core.utils.validation import is_valid_project_name, is_valid_worktree_name

from .models import RecentEntry
from .resolver import PathResolver, validate_names

logger = logging.getLogger(__name__)

SEPARATOR = "|"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_line(line: str) -> Optional[RecentEntry]:
    """Parse one log line; return None for anything malformed."""
    parts = line.strip().split(SEPARATOR)
    if len(parts) != 3:
        return None
    raw_ts, project, worktree = parts
    try:
        ts = datetime.fromisoformat(raw_ts)
    except ValueError:
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    if not is_valid_project_name(project) or not is_valid_worktree_name(worktree):
        return None
    return RecentEntry(timestamp=ts, project=project, worktree=worktree)


def format_line(entry: RecentEntry) -> str:
    return SEPARATOR.join((entry.timestamp.isoformat(timespec="seconds"), entry.project, entry.worktree))


class RecentHistory:
    """Timestamped visit log with lazy existence checks.

    Args:
        path: The ``recent`` file.
        resolver: Used to recompute ``exists`` and to drop dead entries.
        max_entries: Keep at most this many entries (newest win).
        max_age_days: Drop entries older than this; ``None`` disables.
        clock: Returns the current time; tests inject a fixed clock.
    """

    def __init__(
        self,
        path: Path,
        resolver: PathResolver,
        *,
        max_entries: int = 50,
        max_age_days: Optional[int] = 90,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.path = Path(path)
        self.resolver = resolver
        self.max_entries = max_entries
        self.max_age_days = max_age_days
        self.clock = clock

    def _read(self) -> List[RecentEntry]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as exc:
            logger.warning("Cannot read history %s: %s", self.path, exc)
            return []
        entries: List[RecentEntry] = []
        for line in text.splitlines():
            if not line.strip():
                continue
            entry = parse_line(line)
            if entry is None:
                logger.debug("Skipping malformed history line: %r", line)
                continue
            entries.append(entry)
        return entries

    def _write(self, entries: List[RecentEntry]) -> None:
        ordered = sorted(entries, key=lambda e: e.timestamp)

        def _writer(f: TextIO) -> None:
            for entry in ordered:
                f.write(format_line(entry) + "\n")

        try:
            atomic_write(self.path, _writer)
        except OSError as exc:
            raise WranglerError(
                ErrorKind.HISTORY_WRITE_FAILED,
                f"Failed to write history {self.path}: {exc}",
                context={"path": str(self.path)},
            ) from exc

    def _retain(self, entries: List[RecentEntry], now: datetime, keep: RecentEntry) -> List[RecentEntry]:
        kept = []
        cutoff = now - timedelta(days=self.max_age_days) if self.max_age_days is not None else None
        for entry in entries:
            if entry is keep:
                kept.append(entry)
                continue
            if cutoff is not None and entry.timestamp < cutoff:
                continue
            if not self.resolver.exists(entry.project, entry.worktree):
                continue
            kept.append(entry)
        # Oldest first; equal timestamps keep file order, so the newest record is last.
        kept.sort(key=lambda e: e.timestamp)
        return kept[-max(self.max_entries, 1):]

    def record(self, project: str, worktree: str) -> RecentEntry:
        """Record a visit, replacing any earlier entry for the same pair."""
        validate_names(project, worktree)
        now = self.clock()
        entries = [e for e in self._read() if (e.project, e.worktree) != (project, worktree)]
        new = RecentEntry(timestamp=now, project=project, worktree=worktree, exists=True)
        entries.append(new)
        self._write(self._retain(entries, now, new))
        logger.debug("Recorded visit %s/%s", project, worktree)
        return new

    def forget(self, project: str, worktree: str) -> int:
        """Drop every entry for the pair; return how many were removed."""
        entries = self._read()
        kept = [e for e in entries if (e.project, e.worktree) != (project, worktree)]
        removed = len(entries) - len(kept)
        if removed:
            self._write(kept)
            logger.debug("Forgot %d history entries for %s/%s", removed, project, worktree)
        return removed

    def list(self, limit: Optional[int] = None) -> List[RecentEntry]:
        """Newest first, with ``exists`` recomputed. Never writes."""
        entries = sorted(reversed(self._read()), key=lambda e: e.timestamp, reverse=True)
        if limit is not None:
            entries = entries[: max(limit, 0)]
        return [
            RecentEntry(
                timestamp=e.timestamp,
                project=e.project,
                worktree=e.worktree,
                exists=self.resolver.exists(e.project, e.worktree),
            )
            for e in entries
        ]


__all__ = ["RecentHistory", "parse_line", "format_line", "SEPARATOR"]
