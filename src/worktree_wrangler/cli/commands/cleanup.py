"""
Worktree Wrangler cleanup command.

SUMMARY: Remove orphaned and merged worktrees of a project
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import (
    EXIT_FAILURE,
    EXIT_OK,
    OutputFormatter,
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_project_arg,
    get_context,
    report_error,
)
from worktree_wrangler.core.exceptions import WranglerError

SUMMARY = "Remove orphaned and merged worktrees of a project"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser)
    add_force_flag(parser, "Remove even with local changes or a failing archive script")
    add_dry_run_flag(parser)
    parser.add_argument(
        "--archive",
        action="store_true",
        help="Run the project's archive script before each removal",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Cleanup worktrees - delegates to the lifecycle engine."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
    except WranglerError as e:
        return report_error(formatter, e)

    result = ctx.engine.cleanup(
        args.project,
        force=args.force,
        dry_run=args.dry_run,
        run_archive_script=args.archive,
    )
    if not result.ok:
        return report_error(formatter, result.error)

    report = result.value
    exit_code = EXIT_FAILURE if report.failed else EXIT_OK
    if formatter.json_mode:
        payload = {"project": args.project, **report.to_dict()}
        if result.warnings:
            payload["warnings"] = [w.to_json_error() for w in result.warnings]
        formatter.json_output(payload)
        return exit_code

    if not report.candidates:
        formatter.text(f"Nothing to clean up for {args.project}")
        return EXIT_OK

    verb = "Would remove" if report.dry_run else "Candidates"
    formatter.text(f"{verb} ({len(report.candidates)}):")
    for candidate in report.candidates:
        formatter.text(f"  {candidate.info.name:<30} {', '.join(candidate.reasons)}")
    if report.dry_run:
        return EXIT_OK

    for name in report.succeeded:
        formatter.text(f"Removed {name}")
    for name, error in report.failed:
        formatter.error(error, f"Failed to remove {name}: {error}")
    formatter.warnings(result.warnings)
    return exit_code
