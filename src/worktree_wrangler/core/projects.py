"""Project discovery under the configured projects directory."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

from worktree_wrangler.core.exceptions import invalid_name, project_not_found
from worktree_wrangler.core.utils.paths import is_checkout
from worktree_wrangler.core.utils.validation import is_valid_project_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Project:
    """A named git repository directly under ``projects_dir``."""

    name: str
    root: Path


class ProjectRegistry:
    """Read-only view of the projects found under ``projects_dir``.

    Nothing is cached: every call rescans the directory, so repositories
    cloned or deleted between calls are picked up.
    """

    def __init__(self, projects_dir: Path, *, worktrees_dir: Path | None = None) -> None:
        self.projects_dir = Path(projects_dir)
        self.worktrees_dir = Path(worktrees_dir) if worktrees_dir is not None else None

    def list(self) -> List[Project]:
        if not self.projects_dir.is_dir():
            logger.debug("Projects directory missing: %s", self.projects_dir)
            return []
        projects: List[Project] = []
        for child in sorted(self.projects_dir.iterdir(), key=lambda p: p.name):
            if self.worktrees_dir is not None and child == self.worktrees_dir:
                continue
            if is_valid_project_name(child.name) and is_checkout(child):
                projects.append(Project(name=child.name, root=child))
        return projects

    def get(self, name: str) -> Project:
        if not is_valid_project_name(name):
            raise invalid_name("project", name)
        root = self.projects_dir / name
        if not is_checkout(root):
            raise project_not_found(name)
        return Project(name=name, root=root)


__all__ = ["Project", "ProjectRegistry"]
