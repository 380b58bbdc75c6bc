"""
Worktree Wrangler worktree command.

SUMMARY: Print a worktree's path and record the visit
"""

from __future__ import annotations

import argparse

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

SUMMARY = "Print a worktree's path and record the visit"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser)
    add_worktree_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Resolve a worktree; the bare path on stdout suits `cd "$(ww worktree p w)"`."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
    except WranglerError as e:
        return report_error(formatter, e)

    result = ctx.engine.visit(args.project, args.worktree)
    if not result.ok:
        return report_error(formatter, result.error)

    location = result.value
    data = {
        "project": location.project,
        "worktree": location.worktree,
        "path": str(location.path),
        "layout": location.layout.value,
    }
    return finish(formatter, result, data, str(location.path))
