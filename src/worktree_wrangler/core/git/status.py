"""Parsing of ``git status --porcelain=v1 --branch`` output."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

_TRACK_RE = re.compile(r"\[(?P<track>[^\]]*)\]\s*$")


@dataclass(frozen=True)
class GitStatusSummary:
    branch: Optional[str] = None
    upstream: Optional[str] = None
    ahead: int = 0
    behind: int = 0
    upstream_gone: bool = False
    staged: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)

    @property
    def changed_files(self) -> int:
        """Number of distinct paths with staged, unstaged or untracked changes."""
        return len(set(self.staged) | set(self.modified) | set(self.untracked))

    @property
    def clean(self) -> bool:
        return self.changed_files == 0


def _parse_branch_header(header: str) -> Tuple[Optional[str], Optional[str], int, int, bool]:
    """Parse the ``## ...`` line into (branch, upstream, ahead, behind, gone)."""
    text = header[3:].strip()
    ahead = behind = 0
    gone = False

    match = _TRACK_RE.search(text)
    if match:
        for part in match.group("track").split(","):
            part = part.strip()
            if part.startswith("ahead "):
                ahead = int(part.split(" ", 1)[1])
            elif part.startswith("behind "):
                behind = int(part.split(" ", 1)[1])
            elif part == "gone":
                gone = True
        text = text[: match.start()].strip()

    if text.startswith("No commits yet on "):
        return text[len("No commits yet on "):], None, ahead, behind, gone
    if text.startswith("Initial commit on "):
        return text[len("Initial commit on "):], None, ahead, behind, gone
    if text.startswith("HEAD (no branch)"):
        return None, None, ahead, behind, gone

    if "..." in text:
        branch, upstream = text.split("...", 1)
        return branch, upstream.strip() or None, ahead, behind, gone
    return text or None, None, ahead, behind, gone


def parse_status_porcelain(output: str) -> GitStatusSummary:
    """Parse porcelain v1 status (with or without the ``--branch`` header)."""
    staged: List[str] = []
    modified: List[str] = []
    untracked: List[str] = []
    branch: Optional[str] = None
    upstream: Optional[str] = None
    ahead = behind = 0
    gone = False

    for raw in output.splitlines():
        line = raw.rstrip("\n")
        if not line:
            continue
        if line.startswith("## "):
            branch, upstream, ahead, behind, gone = _parse_branch_header(line)
            continue
        # Untracked lines begin with "?? "
        if line.startswith("?? "):
            path = line[3:]
            if path:
                untracked.append(path)
            continue
        if line.startswith("!! ") or len(line) < 3:
            continue

        x = line[0]
        y = line[1]
        path = line[3:] if line[2] == " " else line[2:]
        if " -> " in path:
            path = path.split(" -> ", 1)[-1]

        # Index status (X) indicates staged changes
        if x not in (" ", "?"):
            staged.append(path)
        # Work tree status (Y) indicates unstaged modifications
        if y not in (" ", "?"):
            modified.append(path)

    return GitStatusSummary(
        branch=branch,
        upstream=upstream,
        ahead=ahead,
        behind=behind,
        upstream_gone=gone,
        staged=staged,
        modified=modified,
        untracked=untracked,
    )


__all__ = ["GitStatusSummary", "parse_status_porcelain"]
