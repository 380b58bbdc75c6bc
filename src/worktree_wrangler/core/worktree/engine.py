"""Worktree lifecycle engine: create, remove, cleanup and visit.

The engine is the only component that mutates git state or writes the
recent-history log. Every public operation returns a :class:`Result`;
``WranglerError`` raised by lower layers is converted at this boundary.
Validation and resolution failures return before any side effect.
"""
from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List, Optional

from worktree_wrangler.core.config import RepoConfigStore
from worktree_wrangler.core.exceptions import ErrorKind, WranglerError, invalid_name
from worktree_wrangler.core.git import GitClient, points_into_repository
from worktree_wrangler.core.projects import Project, ProjectRegistry
from worktree_wrangler.core.result import Result, failure, success
from worktree_wrangler.core.utils.validation import is_valid_branch_name

from .history import RecentHistory
from .inventory import WorktreeInventory, resolved_key
from .models import CleanupCandidate, CleanupReport, WorktreeInfo, WorktreeLocation
from .resolver import PathResolver, validate_names
from .scripts import ScriptRunner, script_env

logger = logging.getLogger(__name__)


class WorktreeEngine:
    """Coordinates git, scripts and history for worktree lifecycle operations."""

    def __init__(
        self,
        *,
        git: GitClient,
        projects: ProjectRegistry,
        resolver: PathResolver,
        inventory: WorktreeInventory,
        history: RecentHistory,
        scripts: ScriptRunner,
        repo_configs: RepoConfigStore,
    ) -> None:
        self.git = git
        self.projects = projects
        self.resolver = resolver
        self.inventory = inventory
        self.history = history
        self.scripts = scripts
        self.repo_configs = repo_configs

    # ========== Helpers ==========

    def _record(self, project: str, worktree: str) -> Optional[WranglerError]:
        try:
            self.history.record(project, worktree)
        except WranglerError as exc:
            logger.warning("History update failed for %s/%s: %s", project, worktree, exc)
            return WranglerError(ErrorKind.HISTORY_WRITE_FAILED, str(exc), context=exc.context, cause=exc)
        return None

    def _forget(self, project: str, worktree: str) -> Optional[WranglerError]:
        try:
            self.history.forget(project, worktree)
        except WranglerError as exc:
            logger.warning("History cleanup failed for %s/%s: %s", project, worktree, exc)
            return WranglerError(ErrorKind.HISTORY_WRITE_FAILED, str(exc), context=exc.context, cause=exc)
        return None

    def _rollback_failed_add(self, project: Project, path: Path) -> None:
        """Best-effort removal of whatever a failed ``git worktree add`` left."""
        if path.exists():
            try:
                shutil.rmtree(path)
            except OSError as exc:
                logger.warning("Rollback could not remove %s: %s", path, exc)
        try:
            self.git.prune_worktrees(project.root)
        except WranglerError as exc:
            logger.warning("Rollback prune failed for %s: %s", project.name, exc)

    def _run_setup(self, project: Project, location: WorktreeLocation) -> Optional[WranglerError]:
        try:
            script = self.repo_configs.get(project.name).setup_script
            if script is None:
                logger.info("No setup script configured for %s", project.name)
                return None
            self.scripts.run(
                script,
                location.path,
                env=script_env(project.name, location.worktree, location.path, project.root),
            )
        except WranglerError as exc:
            logger.warning("Setup script failed for %s/%s: %s", project.name, location.worktree, exc)
            return WranglerError(
                ErrorKind.SETUP_SCRIPT_FAILED,
                f"Setup script failed: {exc}",
                context=exc.context,
                cause=exc,
            )
        return None

    # ========== Create ==========

    def create(
        self,
        project: str,
        name: str,
        branch: Optional[str] = None,
        run_setup_script: bool = False,
    ) -> Result[WorktreeLocation]:
        """Create ``<worktrees_dir>/<project>-<name>`` checked out on ``branch``.

        ``branch`` defaults to ``name``; it is created when it does not exist
        yet. Setup-script and history failures become warnings.
        """
        try:
            validate_names(project, name)
            branch = branch or name
            if not is_valid_branch_name(branch):
                raise invalid_name("branch", branch)

            location = self.resolver.standard_location(project, name)
            existing = self.resolver.find(project, name)
            if location.path.exists() or existing is not None:
                path = existing.path if existing is not None else location.path
                raise WranglerError(
                    ErrorKind.ALREADY_EXISTS,
                    f"Worktree already exists: {path}",
                    context={"project": project, "worktree": name, "path": str(path)},
                )

            proj = self.projects.get(project)
            create_branch = not self.git.branch_exists(proj.root, branch)
            location.path.parent.mkdir(parents=True, exist_ok=True)
            try:
                self.git.add_worktree(proj.root, location.path, branch, create_branch=create_branch)
            except WranglerError:
                self._rollback_failed_add(proj, location.path)
                raise
        except WranglerError as exc:
            return failure(exc)
        except OSError as exc:
            return failure(
                WranglerError(
                    ErrorKind.FILESYSTEM_ERROR,
                    f"Cannot prepare worktree directory: {exc}",
                    context={"project": project, "worktree": name},
                )
            )

        logger.info("Created worktree %s/%s at %s (branch %s)", project, name, location.path, branch)
        warnings: List[WranglerError] = []
        if run_setup_script:
            warning = self._run_setup(proj, location)
            if warning is not None:
                warnings.append(warning)
        warning = self._record(project, name)
        if warning is not None:
            warnings.append(warning)
        return success(location, warnings)

    # ========== Remove ==========

    def _check_orphan(self, project: Project, path: Path, *, force: bool) -> None:
        """Refuse to delete a directory that is not an orphaned worktree of ``project``."""
        owned = points_into_repository(path, project.root)
        if owned is False or (path / ".git").is_dir():
            raise WranglerError(
                ErrorKind.INVALID_LOCATION,
                f"{path} is not a worktree of project {project.name}",
                context={"project": project.name, "path": str(path)},
            )
        if owned is None:
            if force:
                return
            raise WranglerError(
                ErrorKind.INVALID_LOCATION,
                f"{path} has no git metadata; use --force to delete it",
                context={"project": project.name, "path": str(path)},
            )
        if force:
            return
        unsaved = self.git.unsaved_files(project.root, path)
        if unsaved:
            raise WranglerError(
                ErrorKind.GIT_OPERATION_FAILED,
                f"{path} contains {len(unsaved)} unsaved file(s); use --force to delete it",
                context={"project": project.name, "path": str(path), "files": unsaved},
            )

    def _delete_orphan(self, project: Project, path: Path) -> None:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise WranglerError(
                ErrorKind.FILESYSTEM_ERROR,
                f"Failed to delete {path}: {exc}",
                context={"project": project.name, "path": str(path)},
            ) from exc
        try:
            self.git.prune_worktrees(project.root)
        except WranglerError as exc:
            logger.warning("git worktree prune failed for %s: %s", project.name, exc)

    def _remove_at(
        self,
        project: Project,
        name: str,
        path: Path,
        *,
        force: bool,
        run_archive_script: bool,
    ) -> List[WranglerError]:
        """Remove the worktree at ``path``; return warnings or raise."""
        warnings: List[WranglerError] = []
        registered = self.inventory.registered_paths(project.name)
        tracked = registered is None or resolved_key(path) in registered
        if not tracked:
            self._check_orphan(project, path, force=force)

        if run_archive_script:
            script = self.repo_configs.get(project.name).archive_script
            if script is not None:
                try:
                    self.scripts.run(script, path, env=script_env(project.name, name, path, project.root))
                except WranglerError as exc:
                    if not force:
                        raise
                    logger.warning("Archive script failed for %s/%s, continuing: %s", project.name, name, exc)
                    warnings.append(exc)

        if tracked:
            self.git.remove_worktree(project.root, path, force=force)
        else:
            self._delete_orphan(project, path)
        logger.info("Removed worktree %s/%s at %s", project.name, name, path)

        warning = self._forget(project.name, name)
        if warning is not None:
            warnings.append(warning)
        return warnings

    def remove(
        self,
        project: str,
        name: str,
        force: bool = False,
        run_archive_script: bool = False,
    ) -> Result[WorktreeLocation]:
        """Remove a worktree (registered or orphaned) and forget its history."""
        try:
            validate_names(project, name)
            location = self.resolver.resolve(project, name)
            proj = self.projects.get(project)
            warnings = self._remove_at(
                proj,
                name,
                location.path,
                force=force,
                run_archive_script=run_archive_script,
            )
        except WranglerError as exc:
            return failure(exc)
        return success(location, warnings)

    # ========== Cleanup ==========

    def _candidate_reasons(self, project: Project, info: WorktreeInfo, default_branch: Optional[str]) -> List[str]:
        if info.orphaned:
            return ["orphaned"]
        if not info.branch:
            return []
        upstream, gone = self.git.upstream_tracking(project.root, info.branch)
        if gone:
            return [f"upstream {upstream or 'branch'} is gone"]
        if upstream and default_branch:
            if default_branch == info.branch or default_branch.endswith("/" + info.branch):
                return []
            if self.git.is_ancestor(project.root, info.branch, default_branch):
                return [f"merged into {default_branch}"]
        return []

    def cleanup_candidates(self, project: str) -> List[CleanupCandidate]:
        """Worktrees that are orphaned or whose branch is merged or gone.

        Raises:
            WranglerError: for invalid names or a missing project.
        """
        validate_names(project)
        proj = self.projects.get(project)
        default_branch = self.git.default_branch(proj.root)
        candidates: List[CleanupCandidate] = []
        for info in self.inventory.list(project):
            if not info.path.is_dir():
                continue
            reasons = self._candidate_reasons(proj, info, default_branch)
            if reasons:
                candidates.append(CleanupCandidate(info=info, reasons=tuple(reasons)))
        return candidates

    def cleanup(
        self,
        project: str,
        force: bool = False,
        dry_run: bool = False,
        run_archive_script: bool = False,
    ) -> Result[CleanupReport]:
        """Remove every cleanup candidate, continuing past failures."""
        try:
            candidates = self.cleanup_candidates(project)
            proj = self.projects.get(project)
        except WranglerError as exc:
            return failure(exc)

        report = CleanupReport(candidates=candidates, dry_run=dry_run)
        warnings: List[WranglerError] = []
        if dry_run:
            return success(report)

        for candidate in candidates:
            info = candidate.info
            try:
                warnings.extend(
                    self._remove_at(
                        proj,
                        info.name,
                        info.path,
                        force=force,
                        run_archive_script=run_archive_script,
                    )
                )
            except WranglerError as exc:
                logger.warning("Cleanup could not remove %s/%s: %s", project, info.name, exc)
                report.failed.append((info.name, exc))
                continue
            report.succeeded.append(info.name)

        # Drop registry entries whose directories vanished.
        try:
            self.git.prune_worktrees(proj.root)
        except WranglerError as exc:
            logger.warning("git worktree prune failed for %s: %s", project, exc)
        return success(report, warnings)

    # ========== Visit ==========

    def visit(self, project: str, name: str) -> Result[WorktreeLocation]:
        """Resolve a worktree and record the visit."""
        try:
            location = self.resolver.resolve(project, name)
        except WranglerError as exc:
            return failure(exc)
        warning = self._record(project, name)
        return success(location, [warning] if warning is not None else [])


__all__ = ["WorktreeEngine"]
