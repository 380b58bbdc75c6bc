"""Common CLI argument registration utilities.

This module provides reusable argument registration functions to reduce
duplication across CLI commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode.

    Args:
        parser: ArgumentParser to add the flag to
    """
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_project_arg(parser: argparse.ArgumentParser, required: bool = True) -> None:
    """Add the project positional argument.

    Args:
        parser: ArgumentParser to add the argument to
        required: Whether the argument is required
    """
    help_text = "Project name (a repository directly under projects_dir)"
    if required:
        parser.add_argument("project", help=help_text)
    else:
        parser.add_argument("project", nargs="?", help=help_text)


def add_worktree_arg(parser: argparse.ArgumentParser) -> None:
    """Add the worktree-name positional argument."""
    parser.add_argument(
        "worktree",
        help="Worktree name (letters, digits, '.', '_', '-'; one '/' allowed)",
    )


def add_force_flag(parser: argparse.ArgumentParser, help_text: str = "Force operation") -> None:
    """Add --force flag.

    Args:
        parser: ArgumentParser to add the flag to
        help_text: Command-specific meaning of --force
    """
    parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help=help_text,
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (DEBUG level in the log file)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Write debug-level entries to the log file",
    )


__all__ = [
    "add_json_flag",
    "add_project_arg",
    "add_worktree_arg",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
]
