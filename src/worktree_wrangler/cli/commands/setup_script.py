"""
Worktree Wrangler setup-script command.

SUMMARY: Show or set the script run after creating a worktree
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli._script_config import register_script_args, run_script_command

SUMMARY = "Show or set the script run after creating a worktree"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    register_script_args(parser, "setup")


def main(args: argparse.Namespace) -> int:
    return run_script_command(args, "setup")
