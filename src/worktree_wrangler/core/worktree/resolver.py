"""Map project/worktree names onto directories under the worktrees root.

Three layouts coexist on disk because the naming scheme changed over time:

- nested:   ``<worktrees_dir>/<project>/<worktree>``
- standard: ``<worktrees_dir>/<project>-<worktree>``
- legacy:   ``<worktrees_dir>/<worktree>``

New worktrees are always created in the standard layout. Lookups check the
layouts in the order above and return the first existing directory.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional, Tuple

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError, invalid_name, worktree_not_found
from worktree_wrangler.core.utils.paths import is_checkout, path_within
from worktree_wrangler.core.utils.validation import is_valid_project_name, is_valid_worktree_name

from .models import WorktreeLayout, WorktreeLocation

logger = logging.getLogger(__name__)


def validate_names(project: str, worktree: Optional[str] = None) -> None:
    """Raise ``INVALID_NAME`` unless both names are acceptable."""
    if not is_valid_project_name(project):
        raise invalid_name("project", project)
    if worktree is not None and not is_valid_worktree_name(worktree):
        raise invalid_name("worktree", worktree)


class PathResolver:
    """Resolve worktree locations without caching.

    The filesystem may change between calls, so every lookup checks the disk
    again.

    Examples:
        >>> resolver = PathResolver(Path("/tmp/wt"))
        >>> resolver.standard_location("acme", "feature-x").path
        PosixPath('/tmp/wt/acme-feature-x')
    """

    def __init__(self, worktrees_dir: Path) -> None:
        self.worktrees_dir = Path(worktrees_dir)

    def candidates(self, project: str, worktree: str) -> Iterator[Tuple[WorktreeLayout, Path]]:
        """Yield ``(layout, path)`` pairs in lookup order."""
        root = self.worktrees_dir
        yield WorktreeLayout.NESTED, root / project / worktree
        yield WorktreeLayout.STANDARD, root / f"{project}-{worktree}"
        yield WorktreeLayout.LEGACY, root / worktree

    def _check_contained(self, project: str, worktree: str, path: Path) -> None:
        if not path_within(path, self.worktrees_dir):
            raise WranglerError(
                ErrorKind.INVALID_LOCATION,
                f"Worktree path escapes the worktrees directory: {path}",
                context={"project": project, "worktree": worktree, "path": str(path)},
            )

    def find(self, project: str, worktree: str) -> Optional[WorktreeLocation]:
        """Return the first existing location, or None.

        Raises:
            WranglerError: ``INVALID_NAME`` for bad names, ``INVALID_LOCATION``
                when the matching directory resolves outside the root.
        """
        validate_names(project, worktree)
        for layout, path in self.candidates(project, worktree):
            if not path.is_dir():
                continue
            # A nested project container is a directory too; only a real
            # checkout counts as a legacy worktree.
            if layout is WorktreeLayout.LEGACY and not is_checkout(path):
                continue
            self._check_contained(project, worktree, path)
            logger.debug("Resolved %s/%s to %s (%s)", project, worktree, path, layout.value)
            return WorktreeLocation(project=project, worktree=worktree, path=path, layout=layout)
        return None

    def resolve(self, project: str, worktree: str) -> WorktreeLocation:
        """Like :meth:`find` but raises ``WORKTREE_NOT_FOUND`` when nothing exists."""
        location = self.find(project, worktree)
        if location is None:
            raise worktree_not_found(project, worktree)
        return location

    def exists(self, project: str, worktree: str) -> bool:
        """True when the pair resolves to an existing directory inside the root."""
        try:
            return self.find(project, worktree) is not None
        except WranglerError:
            return False

    def standard_location(self, project: str, worktree: str) -> WorktreeLocation:
        """Target location for a new worktree (may not exist yet)."""
        validate_names(project, worktree)
        path = self.worktrees_dir / f"{project}-{worktree}"
        self._check_contained(project, worktree, path)
        return WorktreeLocation(project=project, worktree=worktree, path=path, layout=WorktreeLayout.STANDARD)


__all__ = ["PathResolver", "validate_names"]
