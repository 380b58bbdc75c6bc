"""
Worktree Wrangler base-repo command.

SUMMARY: Print the path of a project's main checkout
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import EXIT_OK, OutputFormatter, add_json_flag, add_project_arg, get_context, report_error
from worktree_wrangler.core.exceptions import WranglerError

SUMMARY = "Print the path of a project's main checkout"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_project_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        project = get_context(args).projects.get(args.project)
    except WranglerError as e:
        return report_error(formatter, e)

    formatter.success({"project": project.name, "path": str(project.root)}, str(project.root))
    return EXIT_OK
