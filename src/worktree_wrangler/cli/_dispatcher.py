"""
Auto-discovery CLI dispatcher for Worktree Wrangler.

Scans cli/commands/ for command modules and registers them.
Adding a new command = adding a .py file exposing SUMMARY, register_args()
and main().
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from worktree_wrangler.core.config import ConfigManager
from worktree_wrangler.core.config.models import LOG_FILE_NAME
from worktree_wrangler.core.exceptions import WranglerError
from worktree_wrangler.core.logs import configure_logging, suppress_lastresort

from ._args import add_verbose_flag

logger = logging.getLogger(__name__)

PROG = "worktree-wrangler"


@lru_cache(maxsize=1)
def discover_root_commands() -> dict[str, dict[str, Any]]:
    """Discover commands under cli/commands.

    Returns:
        Dict mapping command module name to command info dict
    """
    commands_dir = Path(__file__).parent / "commands"
    commands: dict[str, dict[str, Any]] = {}

    if not commands_dir.exists():
        return commands

    for item in sorted(commands_dir.glob("*.py")):
        if item.name.startswith("_"):
            continue

        cmd_name = item.stem
        try:
            module = importlib.import_module(f"worktree_wrangler.cli.commands.{cmd_name}")
        except ImportError as e:
            print(f"Warning: Could not import command {cmd_name}: {e}", file=sys.stderr)
            continue
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", cmd_name),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }

    return commands


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argument parser with auto-discovered commands.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Worktree Wrangler - manage Git worktrees across projects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    add_verbose_flag(parser)

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    for cmd_name, cmd_info in sorted(discover_root_commands().items()):
        primary_name = cmd_name.replace("_", "-")
        aliases = [cmd_name] if primary_name != cmd_name else []
        cmd_parser = subparsers.add_parser(
            primary_name,
            aliases=aliases,
            help=cmd_info["summary"],
            description=cmd_info["summary"],
        )
        if cmd_info["register_args"]:
            cmd_info["register_args"](cmd_parser)
        if cmd_info["main"]:
            cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from worktree_wrangler import __version__

    return __version__


def _setup_logging(manager: ConfigManager, level: str) -> None:
    """Route logging to ``<data_dir>/wrangler.log``; never to the console."""
    try:
        configure_logging(log_path=manager.data_dir / LOG_FILE_NAME, level=level)
    except OSError:
        suppress_lastresort()


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the Worktree Wrangler CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command or not getattr(args, "_func", None):
        parser.print_help()
        return 0

    # Configuration is read exactly once; commands receive the result.
    manager = ConfigManager()
    args._config_manager = manager
    args._config = None
    args._config_error = None
    level = "INFO"
    try:
        args._config = manager.load()
        level = args._config.log_level
    except WranglerError as exc:
        args._config_error = exc
    if args.verbose:
        level = "DEBUG"
    _setup_logging(manager, level)

    logger.debug("Invoking %s with %s", args.command, argv)
    try:
        return int(args._func(args) or 0)
    except KeyboardInterrupt:
        logger.warning("Interrupted during %s", args.command)
        print("Interrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
