from __future__ import annotations

import json
from pathlib import Path

import pytest

from worktree_wrangler.core.config import WranglerConfig
from worktree_wrangler.core.context import WranglerContext
from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.github import GhPullRequestSource, PRState, copy_pr_link
from helpers.runners import FakeClipboard, SpyRunner, result

PR_JSON = json.dumps(
    {
        "number": 42,
        "title": "Add widgets",
        "url": "https://github.com/acme/acme/pull/42",
        "state": "OPEN",
        "headRefName": "feature-x",
    }
)


def _ctx(config: WranglerConfig, responses) -> tuple:  # type: ignore[no-untyped-def]
    (config.worktrees_dir / "acme-feature-x").mkdir()
    spy = SpyRunner(responses)
    clipboard = FakeClipboard()
    return WranglerContext.build(config, runner=spy, clipboard=clipboard), spy, clipboard


def _copy(ctx: WranglerContext):  # type: ignore[no-untyped-def]
    return copy_pr_link(
        "acme",
        "feature-x",
        resolver=ctx.resolver,
        git=ctx.git,
        prs=ctx.prs,
        clipboard=ctx.clipboard,
    )


def test_copies_url_of_branch_pr(config: WranglerConfig) -> None:
    ctx, spy, clipboard = _ctx(
        config, {"git symbolic-ref": result("feature-x\n"), "gh pr": result(PR_JSON)}
    )

    pr = _copy(ctx)

    assert pr.number == 42
    assert pr.state is PRState.OPEN
    assert clipboard.copied == ["https://github.com/acme/acme/pull/42"]
    gh_call = spy.calls[-1]
    assert gh_call["argv"][:4] == ["gh", "pr", "view", "feature-x"]
    assert gh_call["cwd"] == config.worktrees_dir / "acme-feature-x"


def test_no_pr_is_pr_not_found(config: WranglerConfig) -> None:
    ctx, _, clipboard = _ctx(
        config,
        {
            "git symbolic-ref": result("feature-x\n"),
            "gh pr": result(stderr='no pull requests found for branch "feature-x"', exit_code=1),
        },
    )

    with pytest.raises(WranglerError) as exc:
        _copy(ctx)

    assert exc.value.kind is ErrorKind.PR_NOT_FOUND
    assert exc.value.context["branch"] == "feature-x"
    assert clipboard.copied == []


def test_detached_head_is_git_failure(config: WranglerConfig) -> None:
    ctx, spy, _ = _ctx(config, {"git symbolic-ref": result(exit_code=1)})

    with pytest.raises(WranglerError) as exc:
        _copy(ctx)

    assert exc.value.kind is ErrorKind.GIT_OPERATION_FAILED
    assert not any(argv[0] == "gh" for argv in spy.argvs)


def test_missing_worktree_never_calls_gh(config: WranglerConfig) -> None:
    spy = SpyRunner()
    ctx = WranglerContext.build(config, runner=spy, clipboard=FakeClipboard())

    with pytest.raises(WranglerError) as exc:
        _copy(ctx)

    assert exc.value.kind is ErrorKind.WORKTREE_NOT_FOUND
    assert spy.calls == []


@pytest.mark.parametrize(
    "stdout,stderr,exit_code,kind",
    [
        ("", "gh: command not found", 127, ErrorKind.TOOL_NOT_FOUND),
        ("", "To get started with GitHub CLI, please run:  gh auth login", 4, ErrorKind.GITHUB_NOT_AUTHENTICATED),
        ("", "HTTP 502: bad gateway", 1, ErrorKind.PR_NOT_FOUND),
        ("not json", "", 0, ErrorKind.PR_NOT_FOUND),
    ],
)
def test_gh_failures(tmp_path: Path, stdout: str, stderr: str, exit_code: int, kind: ErrorKind) -> None:
    source = GhPullRequestSource(SpyRunner({"gh pr": result(stdout, stderr, exit_code)}))

    with pytest.raises(WranglerError) as exc:
        source.find_for_branch(tmp_path, "feature-x")

    assert exc.value.kind is kind


def test_no_pr_returns_none(tmp_path: Path) -> None:
    source = GhPullRequestSource(
        SpyRunner({"gh pr": result(stderr="could not resolve to a PullRequest", exit_code=1)})
    )

    assert source.find_for_branch(tmp_path, "feature-x") is None


def test_merged_state_is_parsed(tmp_path: Path) -> None:
    payload = json.loads(PR_JSON) | {"state": "MERGED"}
    source = GhPullRequestSource(SpyRunner({"gh pr": result(json.dumps(payload))}))

    pr = source.find_for_branch(tmp_path, "feature-x")

    assert pr is not None and pr.state is PRState.MERGED
    assert pr.to_dict()["head_ref_name"] == "feature-x"
