"""Git operation helpers for tests."""
from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import List


def git(repo_path: Path, *args: str) -> str:
    """Run git in ``repo_path`` and return stdout; raises on failure."""
    proc = subprocess.run(
        ["git", *args],
        cwd=repo_path,
        check=True,
        capture_output=True,
        text=True,
        timeout=30,
    )
    return proc.stdout


def git_init(repo_path: Path, branch: str = "main") -> None:
    """Initialize a git repository with a hermetic identity.

    Args:
        repo_path: Path to repository
        branch: Initial branch name
    """
    git(repo_path, "init", "-b", branch)
    git(repo_path, "config", "--local", "user.email", "test@example.com")
    git(repo_path, "config", "--local", "user.name", "Test User")
    git(repo_path, "config", "--local", "commit.gpgsign", "false")


def git_commit(repo_path: Path, message: str, allow_empty: bool = False) -> None:
    """Stage everything and commit.

    Args:
        repo_path: Path to repository/worktree
        message: Commit message
        allow_empty: Allow empty commits
    """
    git(repo_path, "add", "-A")
    cmd = ["commit", "-m", message]
    if allow_empty:
        cmd.append("--allow-empty")
    git(repo_path, *cmd)


def git_create_worktree(repo_path: Path, worktree_path: Path, branch: str, base: str = "main") -> Path:
    """Create a linked worktree on a new branch."""
    worktree_path.parent.mkdir(parents=True, exist_ok=True)
    git(repo_path, "worktree", "add", "-b", branch, str(worktree_path), base)
    return worktree_path


def git_list_worktrees(repo_path: Path) -> List[str]:
    """Paths listed by ``git worktree list --porcelain``."""
    out = git(repo_path, "worktree", "list", "--porcelain")
    return [line.split(" ", 1)[1] for line in out.splitlines() if line.startswith("worktree ")]


def git_current_branch(repo_path: Path) -> str:
    return git(repo_path, "rev-parse", "--abbrev-ref", "HEAD").strip()


def git_branch_exists(repo_path: Path, branch: str) -> bool:
    proc = subprocess.run(
        ["git", "show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
        cwd=repo_path,
        capture_output=True,
        text=True,
        timeout=30,
    )
    return proc.returncode == 0


def make_orphan(repo_path: Path, worktree_path: Path) -> None:
    """Turn a linked worktree into an orphan by dropping git's admin entry."""
    gitdir = (worktree_path / ".git").read_text(encoding="utf-8").split(":", 1)[1].strip()
    admin = Path(gitdir)
    if not admin.is_absolute():
        admin = (worktree_path / admin).resolve()
    shutil.rmtree(admin)
