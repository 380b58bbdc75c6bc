"""
Worktree Wrangler list command.

SUMMARY: List projects, or the worktrees of one project
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import (
    EXIT_OK,
    OutputFormatter,
    add_json_flag,
    add_project_arg,
    format_age,
    get_context,
    report_error,
)
from worktree_wrangler.core.exceptions import WranglerError
from worktree_wrangler.core.worktree import WorktreeInfo

SUMMARY = "List projects, or the worktrees of one project"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser, required=False)
    add_json_flag(parser)


def _describe(info: WorktreeInfo) -> str:
    flags = []
    if info.orphaned:
        flags.append("orphaned")
    if info.prunable:
        flags.append("missing")
    if info.status is not None and not info.status.clean:
        flags.append(f"{info.status.modified_files} changed")
    if info.status is not None and (info.status.ahead or info.status.behind):
        flags.append(f"+{info.status.ahead}/-{info.status.behind}")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return f"  {info.name:<30} {info.branch or '(detached)':<30} {format_age(info.last_activity)}{suffix}"


def main(args: argparse.Namespace) -> int:
    """List projects or worktrees - delegates to the registry and inventory."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = get_context(args)
        if not args.project:
            projects = ctx.projects.list()
            if formatter.json_mode:
                formatter.json_output(
                    {
                        "projects": [{"name": p.name, "root": str(p.root)} for p in projects],
                        "total": len(projects),
                    }
                )
                return EXIT_OK
            if not projects:
                formatter.text(f"No projects found in {ctx.config.projects_dir}")
                return EXIT_OK
            formatter.text(f"Projects in {ctx.config.projects_dir}:")
            for p in projects:
                formatter.text(f"  {p.name}")
            return EXIT_OK

        worktrees = ctx.inventory.list(args.project)
    except WranglerError as e:
        return report_error(formatter, e)

    if formatter.json_mode:
        formatter.json_output(
            {
                "project": args.project,
                "worktrees": [w.to_dict() for w in worktrees],
                "total": len(worktrees),
            }
        )
        return EXIT_OK

    if not worktrees:
        formatter.text(f"No worktrees for {args.project}")
        return EXIT_OK
    formatter.text(f"Worktrees for {args.project}:")
    for info in worktrees:
        formatter.text(_describe(info))
    return EXIT_OK
