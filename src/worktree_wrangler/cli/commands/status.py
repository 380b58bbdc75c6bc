"""
Worktree Wrangler status command.

SUMMARY: Show branch, changes and activity of a worktree
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import (
    EXIT_OK,
    OutputFormatter,
    add_json_flag,
    add_project_arg,
    add_worktree_arg,
    format_age,
    get_context,
    report_error,
)
from worktree_wrangler.core.exceptions import WranglerError

SUMMARY = "Show branch, changes and activity of a worktree"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser)
    add_worktree_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
        info = ctx.inventory.get(args.project, args.worktree)
    except WranglerError as e:
        return report_error(formatter, e)

    if formatter.json_mode:
        formatter.json_output(info.to_dict())
        return EXIT_OK

    formatter.text(f"{info.project}/{info.name}")
    formatter.text_kv("Path", info.path)
    formatter.text_kv("Branch", info.branch or "(detached)")
    formatter.text_kv("Layout", info.layout.value if info.layout else "external")
    if info.status is None:
        formatter.text_kv("Status", "unavailable")
    else:
        state = "clean" if info.status.clean else f"{info.status.modified_files} changed file(s)"
        formatter.text_kv("Status", state)
        formatter.text_kv("Ahead/behind", f"{info.status.ahead}/{info.status.behind}")
    formatter.text_kv("Last activity", format_age(info.last_activity))
    if info.orphaned:
        formatter.text_kv("Orphaned", "yes (not in git's worktree registry)")
    return EXIT_OK
