"""Enumerate a project's worktrees from git's registry and the disk."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from worktree_wrangler.core.exceptions import WranglerError
from worktree_wrangler.core.git import GitClient, GitWorktreeEntry, points_into_repository, read_head_branch
from worktree_wrangler.core.projects import Project, ProjectRegistry
from worktree_wrangler.core.utils.paths import is_checkout

from .models import WorktreeInfo, WorktreeLayout, WorktreeStatus
from .resolver import PathResolver, validate_names

logger = logging.getLogger(__name__)

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


def resolved_key(path: Path) -> Path:
    """Symlink-resolved form of ``path`` for identity comparisons."""
    try:
        return path.resolve()
    except OSError:
        return path.absolute()


def _dir_mtime(path: Path) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    except OSError:
        return None


class WorktreeInventory:
    """Read-only listing of worktrees for one project at a time.

    Git's registry (``git worktree list --porcelain``) is the primary source.
    The three directory layouts under the worktrees root are always scanned
    as well; scanned directories missing from the registry are orphans.
    """

    def __init__(self, git: GitClient, resolver: PathResolver, projects: ProjectRegistry) -> None:
        self.git = git
        self.resolver = resolver
        self.projects = projects

    # ========== Naming ==========

    def describe_path(self, project: str, path: Path) -> Tuple[str, Optional[WorktreeLayout]]:
        """Derive ``(worktree name, layout)`` from a worktree directory."""
        root = resolved_key(self.resolver.worktrees_dir)
        try:
            rel = resolved_key(path).relative_to(root)
        except ValueError:
            return path.name, None
        parts = rel.parts
        if len(parts) >= 2 and parts[0] == project:
            return "/".join(parts[1:]), WorktreeLayout.NESTED
        prefix = f"{project}-"
        if parts and parts[0].startswith(prefix) and len(parts[0]) > len(prefix):
            return "/".join((parts[0][len(prefix):],) + parts[1:]), WorktreeLayout.STANDARD
        return "/".join(parts), WorktreeLayout.LEGACY

    # ========== Disk scan ==========

    def _expand(self, directory: Path) -> Iterator[Path]:
        """Yield worktree directories at ``directory`` or one level below it.

        Worktree names may contain one ``/`` (``user/topic``), which puts the
        checkout one level deeper than its container.
        """
        if is_checkout(directory):
            yield directory
            return
        nested = [c for c in sorted(directory.iterdir()) if c.is_dir()] if directory.is_dir() else []
        checkouts = [c for c in nested if is_checkout(c)]
        if checkouts:
            yield from checkouts
        else:
            yield directory

    def _belongs(self, checkout: Path, project: Project, *, strict: bool) -> bool:
        verdict = points_into_repository(checkout, project.root)
        if verdict is None:
            # A checkout with its own .git directory is a separate clone.
            if (checkout / ".git").is_dir():
                return False
            return not strict
        return verdict

    def scan(self, project: Project) -> List[Tuple[Path, WorktreeLayout]]:
        """Find directories under the worktrees root that belong to ``project``."""
        root = self.resolver.worktrees_dir
        if not root.is_dir():
            return []
        found: Dict[Path, Tuple[Path, WorktreeLayout]] = {}

        def _add(path: Path, layout: WorktreeLayout) -> None:
            found.setdefault(resolved_key(path), (path, layout))

        container = root / project.name
        if container.is_dir() and not is_checkout(container):
            for child in sorted(container.iterdir()):
                if child.is_dir():
                    for path in self._expand(child):
                        if self._belongs(path, project, strict=False):
                            _add(path, WorktreeLayout.NESTED)

        for child in sorted(root.glob(f"{project.name}-*")):
            if child.is_dir():
                for path in self._expand(child):
                    if self._belongs(path, project, strict=False):
                        _add(path, WorktreeLayout.STANDARD)

        for child in sorted(root.iterdir()):
            if child.is_dir() and is_checkout(child) and self._belongs(child, project, strict=True):
                _add(child, WorktreeLayout.LEGACY)

        return list(found.values())

    # ========== Snapshot ==========

    def _status(self, path: Path) -> Optional[WorktreeStatus]:
        try:
            summary = self.git.status(path)
        except WranglerError as exc:
            logger.debug("Status unavailable for %s: %s", path, exc)
            return None
        return WorktreeStatus(
            clean=summary.clean,
            modified_files=summary.changed_files,
            ahead=summary.ahead,
            behind=summary.behind,
        )

    def _last_activity(self, path: Path) -> Optional[datetime]:
        return self.git.last_commit_time(path) or _dir_mtime(path)

    def _info(
        self,
        project: Project,
        path: Path,
        *,
        branch: Optional[str],
        head: Optional[str],
        orphaned: bool,
        prunable: bool = False,
        layout: Optional[WorktreeLayout] = None,
    ) -> WorktreeInfo:
        name, derived = self.describe_path(project.name, path)
        exists = path.is_dir()
        return WorktreeInfo(
            name=name,
            path=path,
            project=project.name,
            branch=branch,
            status=self._status(path) if exists else None,
            last_activity=self._last_activity(path) if exists else None,
            orphaned=orphaned,
            layout=layout or derived,
            head=head,
            prunable=prunable or not exists,
        )

    def _registry(self, project: Project) -> Optional[List[GitWorktreeEntry]]:
        """Linked worktree entries, or None when git cannot list them."""
        try:
            entries = self.git.list_worktrees(project.root)
        except WranglerError as exc:
            logger.warning("git worktree list failed for %s: %s", project.name, exc)
            return None
        primary = resolved_key(project.root)
        return [e for e in entries if not e.bare and resolved_key(e.path) != primary]

    def list(self, project: str) -> List[WorktreeInfo]:
        """Return every worktree of ``project``, most recently active first."""
        validate_names(project)
        proj = self.projects.get(project)
        registered = self._registry(proj)
        registry_known = registered is not None

        infos: List[WorktreeInfo] = []
        seen: set[Path] = set()
        for entry in registered or []:
            seen.add(resolved_key(entry.path))
            infos.append(
                self._info(
                    proj,
                    entry.path,
                    branch=entry.branch,
                    head=entry.head,
                    orphaned=False,
                    prunable=entry.prunable,
                )
            )

        for path, layout in self.scan(proj):
            if resolved_key(path) in seen:
                continue
            infos.append(
                self._info(
                    proj,
                    path,
                    branch=read_head_branch(path),
                    head=None,
                    orphaned=registry_known,
                    layout=layout,
                )
            )

        infos.sort(key=lambda i: i.name)
        infos.sort(key=lambda i: i.last_activity or _EPOCH, reverse=True)
        return infos

    def get(self, project: str, worktree: str) -> WorktreeInfo:
        """Snapshot of one worktree, resolved through the path resolver."""
        location = self.resolver.resolve(project, worktree)
        key = resolved_key(location.path)
        for info in self.list(project):
            if resolved_key(info.path) == key:
                return info
        proj = self.projects.get(project)
        return self._info(
            proj,
            location.path,
            branch=read_head_branch(location.path),
            head=None,
            orphaned=not self.is_registered(project, location.path),
            layout=location.layout,
        )

    def registered_paths(self, project: str) -> Optional[set[Path]]:
        """Resolved paths of linked worktrees, or None when git cannot say."""
        registered = self._registry(self.projects.get(project))
        if registered is None:
            return None
        return {resolved_key(e.path) for e in registered}

    def is_registered(self, project: str, path: Path) -> bool:
        """True when git's registry lists ``path`` as a linked worktree."""
        paths = self.registered_paths(project)
        return paths is not None and resolved_key(path) in paths


__all__ = ["WorktreeInventory", "resolved_key"]
