"""Pull-request lookup through the GitHub CLI (``gh``)."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.git import GitClient
from worktree_wrangler.core.utils.clipboard import ClipboardSink
from worktree_wrangler.core.utils.subprocess import NOT_FOUND_EXIT_CODE, ProcessRunner, SubprocessRunner
from worktree_wrangler.core.worktree.resolver import PathResolver

logger = logging.getLogger(__name__)

PR_FIELDS = "number,title,url,state,headRefName"

_NO_PR_MARKERS = ("no pull requests found", "could not resolve to a pullrequest")
_AUTH_MARKERS = ("gh auth login", "not logged in", "authentication", "http 401")


class PRState(str, Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    MERGED = "MERGED"


@dataclass(frozen=True)
class PullRequest:
    number: int
    title: str
    url: str
    state: PRState
    head_ref_name: str

    @classmethod
    def from_gh(cls, payload: Dict[str, Any]) -> "PullRequest":
        return cls(
            number=int(payload["number"]),
            title=str(payload.get("title") or ""),
            url=str(payload["url"]),
            state=PRState(str(payload.get("state") or "OPEN").upper()),
            head_ref_name=str(payload.get("headRefName") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "url": self.url,
            "state": self.state.value,
            "head_ref_name": self.head_ref_name,
        }


class GhPullRequestSource:
    """Finds the pull request for a branch with ``gh pr view``."""

    def __init__(self, runner: Optional[ProcessRunner] = None, *, timeout: float = 15.0) -> None:
        self.runner = runner or SubprocessRunner()
        self.timeout = timeout

    def find_for_branch(self, repo: Path, branch: str) -> Optional[PullRequest]:
        """Return the branch's pull request, or None when it has none.

        Raises:
            WranglerError: ``TOOL_NOT_FOUND`` when ``gh`` is not installed,
                ``GITHUB_NOT_AUTHENTICATED`` when it is not logged in.
        """
        argv = ["gh", "pr", "view", branch, "--json", PR_FIELDS]
        result = self.runner.run(argv, cwd=repo, timeout=self.timeout)
        if result.exit_code == NOT_FOUND_EXIT_CODE and not result.stdout:
            raise WranglerError(
                ErrorKind.TOOL_NOT_FOUND,
                "GitHub CLI (gh) not found. Install it from https://cli.github.com/",
                context={"tool": "gh"},
            )
        if not result.ok:
            stderr = result.stderr.lower()
            if any(marker in stderr for marker in _NO_PR_MARKERS):
                return None
            if any(marker in stderr for marker in _AUTH_MARKERS):
                raise WranglerError(
                    ErrorKind.GITHUB_NOT_AUTHENTICATED,
                    "GitHub CLI is not authenticated. Run: gh auth login",
                    context={"stderr": result.stderr, "exit_code": result.exit_code},
                )
            raise WranglerError(
                ErrorKind.PR_NOT_FOUND,
                f"gh pr view failed for {branch}: {result.stderr.strip()}",
                context={"branch": branch, "stderr": result.stderr, "exit_code": result.exit_code},
            )
        try:
            return PullRequest.from_gh(json.loads(result.stdout))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise WranglerError(
                ErrorKind.PR_NOT_FOUND,
                f"Unexpected gh output for {branch}: {exc}",
                context={"branch": branch},
            ) from exc


def copy_pr_link(
    project: str,
    worktree: str,
    *,
    resolver: PathResolver,
    git: GitClient,
    prs: GhPullRequestSource,
    clipboard: ClipboardSink,
) -> PullRequest:
    """Copy the URL of the pull request for a worktree's current branch."""
    location = resolver.resolve(project, worktree)
    branch = git.current_branch(location.path)
    if not branch:
        raise WranglerError(
            ErrorKind.GIT_OPERATION_FAILED,
            f"Worktree {project}/{worktree} has no current branch (detached HEAD?)",
            context={"project": project, "worktree": worktree, "path": str(location.path)},
        )
    pr = prs.find_for_branch(location.path, branch)
    if pr is None:
        raise WranglerError(
            ErrorKind.PR_NOT_FOUND,
            f"No pull request found for branch {branch}",
            context={"project": project, "worktree": worktree, "branch": branch},
        )
    clipboard.copy(pr.url)
    logger.info("Copied PR #%s link for %s/%s", pr.number, project, worktree)
    return pr


__all__ = ["PRState", "PullRequest", "GhPullRequestSource", "copy_pr_link", "PR_FIELDS"]
