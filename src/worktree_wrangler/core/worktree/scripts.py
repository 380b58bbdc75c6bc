"""Run per-repository setup and archive scripts."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError, script_execution_error
from worktree_wrangler.core.utils.paths import expand_tilde
from worktree_wrangler.core.utils.subprocess import ProcessRunner, SubprocessRunner
from worktree_wrangler.core.utils.validation import is_executable

from .models import ExecOutcome

logger = logging.getLogger(__name__)


def script_env(project: str, worktree: str, worktree_path: Path, project_root: Path) -> dict[str, str]:
    """Environment handed to setup/archive scripts."""
    return {
        "WRANGLER_PROJECT": project,
        "WRANGLER_WORKTREE": worktree,
        "WRANGLER_WORKTREE_PATH": str(worktree_path),
        "WRANGLER_PROJECT_ROOT": str(project_root),
    }


class ScriptRunner:
    """Executes a user script with the worktree as working directory."""

    def __init__(self, runner: Optional[ProcessRunner] = None, *, timeout: float = 300.0) -> None:
        self.runner = runner or SubprocessRunner()
        self.timeout = timeout

    def run(
        self,
        script_path: Path,
        working_dir: Path,
        timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> ExecOutcome:
        """Run ``script_path`` in ``working_dir`` and return its outcome.

        Raises:
            WranglerError: ``SCRIPT_NOT_EXECUTABLE`` before spawning when the
                script is missing or lacks the execute bit;
                ``SCRIPT_EXECUTION_ERROR`` on non-zero exit or timeout
                (exit code 124).
        """
        script = expand_tilde(script_path)
        if not is_executable(script):
            raise WranglerError(
                ErrorKind.SCRIPT_NOT_EXECUTABLE,
                f"Script is missing or not executable: {script}",
                context={"script_path": str(script)},
            )

        effective = timeout if timeout is not None else self.timeout
        logger.info("Running script %s in %s", script, working_dir)
        outcome = self.runner.run([str(script)], cwd=working_dir, env=env, timeout=effective)
        if not outcome.ok:
            logger.warning("Script %s failed with exit code %s", script, outcome.exit_code)
            raise script_execution_error(script, stderr=outcome.stderr, exit_code=outcome.exit_code)
        return outcome


__all__ = ["ScriptRunner", "script_env"]
