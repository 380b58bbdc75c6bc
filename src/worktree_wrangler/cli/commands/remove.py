"""
Worktree Wrangler remove command.

SUMMARY: Remove a worktree
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import (
    OutputFormatter,
    add_force_flag,
    add_json_flag,
    add_project_arg,
    add_worktree_arg,
    finish,
    get_context,
    report_error,
)
from worktree_wrangler.core.exceptions import WranglerError

SUMMARY = "Remove a worktree"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser)
    add_worktree_arg(parser)
    add_force_flag(parser, "Remove even with local changes or a failing archive script")
    parser.add_argument(
        "--archive",
        action="store_true",
        help="Run the project's archive script before removing",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Remove a worktree - delegates to the lifecycle engine."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
    except WranglerError as e:
        return report_error(formatter, e)

    result = ctx.engine.remove(
        args.project,
        args.worktree,
        force=args.force,
        run_archive_script=args.archive,
    )
    if not result.ok:
        return report_error(formatter, result.error)

    location = result.value
    data = {"project": location.project, "worktree": location.worktree, "path": str(location.path)}
    return finish(formatter, result, data, f"Removed worktree {location.project}/{location.worktree}")
