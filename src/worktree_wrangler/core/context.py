"""Wiring of the components for one invocation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from worktree_wrangler.core.config import RepoConfigStore, WranglerConfig
from worktree_wrangler.core.git import GitClient
from worktree_wrangler.core.github import GhPullRequestSource
from worktree_wrangler.core.projects import ProjectRegistry
from worktree_wrangler.core.utils.clipboard import ClipboardSink, SystemClipboard
from worktree_wrangler.core.utils.subprocess import ProcessRunner, SubprocessRunner
from worktree_wrangler.core.worktree import (
    PathResolver,
    RecentHistory,
    ScriptRunner,
    WorktreeEngine,
    WorktreeInventory,
)


@dataclass
class WranglerContext:
    config: WranglerConfig
    runner: ProcessRunner
    git: GitClient
    projects: ProjectRegistry
    resolver: PathResolver
    inventory: WorktreeInventory
    history: RecentHistory
    scripts: ScriptRunner
    repo_configs: RepoConfigStore
    engine: WorktreeEngine
    prs: GhPullRequestSource
    clipboard: ClipboardSink

    @classmethod
    def build(
        cls,
        config: WranglerConfig,
        *,
        runner: Optional[ProcessRunner] = None,
        clipboard: Optional[ClipboardSink] = None,
    ) -> "WranglerContext":
        """Construct every component from ``config``.

        A single ``runner`` is shared so tests can observe every child process.
        """
        runner = runner or SubprocessRunner()
        git = GitClient(runner, timeout=config.git_timeout)
        projects = ProjectRegistry(config.projects_dir, worktrees_dir=config.worktrees_dir)
        resolver = PathResolver(config.worktrees_dir)
        inventory = WorktreeInventory(git, resolver, projects)
        history = RecentHistory(
            config.recent_file,
            resolver,
            max_entries=config.history_max_entries,
            max_age_days=config.history_max_age_days,
        )
        scripts = ScriptRunner(runner, timeout=config.script_timeout)
        repo_configs = RepoConfigStore(config.repos_dir)
        engine = WorktreeEngine(
            git=git,
            projects=projects,
            resolver=resolver,
            inventory=inventory,
            history=history,
            scripts=scripts,
            repo_configs=repo_configs,
        )
        return cls(
            config=config,
            runner=runner,
            git=git,
            projects=projects,
            resolver=resolver,
            inventory=inventory,
            history=history,
            scripts=scripts,
            repo_configs=repo_configs,
            engine=engine,
            prs=GhPullRequestSource(runner, timeout=config.tool_timeout),
            clipboard=clipboard or SystemClipboard(runner, timeout=config.tool_timeout),
        )


__all__ = ["WranglerContext"]
