"""Git command wrapper used by the inventory and lifecycle engine."""
from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from worktree_wrangler.core.exceptions import git_operation_failed
from worktree_wrangler.core.utils.subprocess import ExecResult, ProcessRunner, SubprocessRunner

from .status import GitStatusSummary, parse_status_porcelain
from .worktree import GitWorktreeEntry, parse_worktree_list

logger = logging.getLogger(__name__)

_DEFAULT_BRANCH_CANDIDATES = ("main", "master")


class GitClient:
    """Runs ``git`` through a :class:`ProcessRunner`.

    Every call is awaited to completion before returning. Failures of
    mutating commands raise ``GIT_OPERATION_FAILED`` carrying git's stderr
    and exit code; query helpers return ``None``/``False`` instead.
    """

    def __init__(self, runner: Optional[ProcessRunner] = None, *, timeout: float = 60.0) -> None:
        self.runner = runner or SubprocessRunner()
        self.timeout = timeout

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path,
        check: bool = True,
        input: Optional[str] = None,
    ) -> ExecResult:
        argv = ["git", *args]
        result = self.runner.run(argv, cwd=cwd, timeout=self.timeout, input=input)
        if check and not result.ok:
            raise git_operation_failed(
                f"git {args[0] if args else ''} failed (exit {result.exit_code}): "
                f"{result.stderr.strip() or result.stdout.strip()}",
                stderr=result.stderr,
                exit_code=result.exit_code,
                argv=argv,
            )
        return result

    # ========== Worktree registry ==========

    def list_worktrees(self, repo: Path) -> List[GitWorktreeEntry]:
        result = self.run(["worktree", "list", "--porcelain"], cwd=repo)
        return parse_worktree_list(result.stdout)

    def add_worktree(
        self,
        repo: Path,
        path: Path,
        branch: str,
        *,
        create_branch: bool,
        start_point: Optional[str] = None,
    ) -> ExecResult:
        if create_branch:
            args = ["worktree", "add", "-b", branch, "--", str(path)]
            if start_point:
                args.append(start_point)
        else:
            args = ["worktree", "add", "--", str(path), branch]
        return self.run(args, cwd=repo)

    def remove_worktree(self, repo: Path, path: Path, *, force: bool = False) -> ExecResult:
        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.extend(["--", str(path)])
        return self.run(args, cwd=repo)

    def prune_worktrees(self, repo: Path) -> ExecResult:
        return self.run(["worktree", "prune"], cwd=repo)

    # ========== Refs ==========

    def branch_exists(self, repo: Path, branch: str) -> bool:
        result = self.run(["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"], cwd=repo, check=False)
        return result.ok

    def current_branch(self, path: Path) -> Optional[str]:
        result = self.run(["symbolic-ref", "--short", "-q", "HEAD"], cwd=path, check=False)
        name = result.stdout.strip()
        return name if result.ok and name else None

    def default_branch(self, repo: Path) -> Optional[str]:
        """Return the remote's default branch (``origin/HEAD``), else local main/master."""
        result = self.run(["symbolic-ref", "--short", "-q", "refs/remotes/origin/HEAD"], cwd=repo, check=False)
        name = result.stdout.strip()
        if result.ok and name:
            return name
        for candidate in _DEFAULT_BRANCH_CANDIDATES:
            if self.branch_exists(repo, candidate):
                return candidate
        return None

    def is_ancestor(self, repo: Path, ref: str, target: str) -> bool:
        result = self.run(["merge-base", "--is-ancestor", ref, target], cwd=repo, check=False)
        return result.exit_code == 0

    def upstream_tracking(self, repo: Path, branch: str) -> Tuple[Optional[str], bool]:
        """Return ``(upstream, gone)`` for a local branch."""
        result = self.run(
            ["for-each-ref", "--format=%(upstream:short)|%(upstream:track)", f"refs/heads/{branch}"],
            cwd=repo,
            check=False,
        )
        line = result.stdout.strip().splitlines()[0] if result.ok and result.stdout.strip() else ""
        if not line:
            return None, False
        upstream, _, track = line.partition("|")
        return (upstream or None), track.strip() == "[gone]"

    # ========== Worktree state ==========

    def status(self, path: Path) -> GitStatusSummary:
        result = self.run(["status", "--porcelain=v1", "--branch", "--untracked-files=all"], cwd=path)
        return parse_status_porcelain(result.stdout)

    def unsaved_files(self, repo: Path, path: Path) -> List[str]:
        """Files under ``path`` whose content is not in ``repo``'s object store.

        Used for checkouts whose admin directory is gone, where ``git status``
        no longer works. Paths are returned relative to ``path``.
        """
        files: List[str] = []
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames[:] = [d for d in dirnames if d != ".git"]
            for fname in filenames:
                full = os.path.join(dirpath, fname)
                if fname == ".git" or os.path.islink(full) or not os.path.isfile(full):
                    continue
                files.append(full)
        if not files:
            return []
        files.sort()

        hashed = self.run(["hash-object", "--stdin-paths"], cwd=repo, input="\n".join(files) + "\n")
        hashes = hashed.stdout.split()
        checked = self.run(["cat-file", "--batch-check"], cwd=repo, input="\n".join(hashes) + "\n")
        unsaved: List[str] = []
        for full, line in zip(files, checked.stdout.splitlines()):
            if line.endswith(" missing"):
                unsaved.append(os.path.relpath(full, path))
        return unsaved

    def last_commit_time(self, path: Path) -> Optional[datetime]:
        result = self.run(["log", "-1", "--format=%ct"], cwd=path, check=False)
        raw = result.stdout.strip()
        if not result.ok or not raw.isdigit():
            return None
        return datetime.fromtimestamp(int(raw), tz=timezone.utc)


__all__ = ["GitClient"]
