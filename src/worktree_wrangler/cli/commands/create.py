"""
Worktree Wrangler create command.

SUMMARY: Create a worktree for a project
"""

from __future__ import annotations

import argparse
import sys

from worktree_wrangler.cli import (
    OutputFormatter,
    add_json_flag,
    add_project_arg,
    add_worktree_arg,
    finish,
    get_context,
    report_error,
)
from worktree_wrangler.core.exceptions import WranglerError

SUMMARY = "Create a worktree for a project"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser)
    add_worktree_arg(parser)
    parser.add_argument(
        "--branch",
        "-b",
        type=str,
        help="Branch to check out (created when missing; defaults to the worktree name)",
    )
    parser.add_argument(
        "--setup",
        action="store_true",
        help="Run the project's setup script in the new worktree",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Create a worktree - delegates to the lifecycle engine."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
    except WranglerError as e:
        return report_error(formatter, e)

    result = ctx.engine.create(
        args.project,
        args.worktree,
        branch=args.branch,
        run_setup_script=args.setup,
    )
    if not result.ok:
        return report_error(formatter, result.error)

    location = result.value
    data = {
        "project": location.project,
        "worktree": location.worktree,
        "branch": args.branch or args.worktree,
        "path": str(location.path),
        "layout": location.layout.value,
    }
    return finish(formatter, result, data, f"Created worktree {location.project}/{location.worktree} at {location.path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    args = parser.parse_args()
    sys.exit(main(args))
