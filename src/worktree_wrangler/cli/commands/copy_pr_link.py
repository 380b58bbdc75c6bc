"""
Worktree Wrangler copy-pr-link command.

SUMMARY: Copy the pull-request URL of a worktree's branch to the clipboard
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import (
    EXIT_OK,
    OutputFormatter,
    add_json_flag,
    add_project_arg,
    add_worktree_arg,
    get_context,
    report_error,
)
from worktree_wrangler.core.exceptions import WranglerError
from worktree_wrangler.core.github import copy_pr_link

SUMMARY = "Copy the pull-request URL of a worktree's branch to the clipboard"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser)
    add_worktree_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
        pr = copy_pr_link(
            args.project,
            args.worktree,
            resolver=ctx.resolver,
            git=ctx.git,
            prs=ctx.prs,
            clipboard=ctx.clipboard,
        )
    except WranglerError as e:
        return report_error(formatter, e)

    formatter.success(
        {"pull_request": pr.to_dict(), "copied": True},
        f"Copied PR #{pr.number} ({pr.state.value.lower()}): {pr.url}",
    )
    return EXIT_OK
