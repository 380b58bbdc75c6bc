"""
Worktree Wrangler recent command.

SUMMARY: Show recently visited worktrees
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import EXIT_OK, OutputFormatter, add_json_flag, format_age, get_context, report_error
from worktree_wrangler.core.exceptions import WranglerError

SUMMARY = "Show recently visited worktrees"

DEFAULT_LIMIT = 10


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--limit",
        "-l",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Number of entries to show (default: {DEFAULT_LIMIT})",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
    except WranglerError as e:
        return report_error(formatter, e)

    entries = ctx.history.list(args.limit)
    if formatter.json_mode:
        formatter.json_output({"entries": [e.to_dict() for e in entries], "total": len(entries)})
        return EXIT_OK

    if not entries:
        formatter.text("No recent worktrees")
        return EXIT_OK
    for entry in entries:
        marker = "" if entry.exists else "  (missing)"
        formatter.text(f"  {entry.project}/{entry.worktree:<30} {format_age(entry.timestamp)}{marker}")
    return EXIT_OK
