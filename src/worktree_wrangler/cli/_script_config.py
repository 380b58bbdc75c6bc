"""Shared implementation of the setup-script and archive-script commands."""
from __future__ import annotations

import argparse

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.utils.paths import expand_tilde
from worktree_wrangler.core.utils.validation import is_executable

from ._args import add_json_flag, add_project_arg
from ._output import OutputFormatter
from ._utils import EXIT_OK, get_context, report_error


def register_script_args(parser: argparse.ArgumentParser, kind: str) -> None:
    add_project_arg(parser)
    parser.add_argument(
        "script",
        nargs="?",
        help=f"Path to the {kind} script (omit to show the current one)",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help=f"Remove the configured {kind} script",
    )
    add_json_flag(parser)


def run_script_command(args: argparse.Namespace, kind: str) -> int:
    """Show, set or clear the ``kind`` ("setup" or "archive") script of a project."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    key = f"{kind}_script"

    try:
        ctx = get_context(args)
        ctx.projects.get(args.project)
        if args.clear:
            cfg = ctx.repo_configs.set_script(args.project, kind, None)
            message = f"Cleared {kind} script for {args.project}"
        elif args.script:
            script = expand_tilde(args.script).absolute()
            if not script.is_file():
                raise WranglerError(
                    ErrorKind.SCRIPT_NOT_EXECUTABLE,
                    f"Script not found: {script}",
                    context={"script_path": str(script)},
                )
            cfg = ctx.repo_configs.set_script(args.project, kind, script)
            message = f"Set {kind} script for {args.project}: {script}"
            if not is_executable(script):
                formatter.text(f"Note: {script} is not executable yet (chmod +x)")
        else:
            cfg = ctx.repo_configs.get(args.project)
            current = getattr(cfg, key)
            message = str(current) if current else f"No {kind} script configured for {args.project}"
    except WranglerError as e:
        return report_error(formatter, e)

    formatter.success({"project": args.project, key: cfg.to_dict()[key]}, message)
    return EXIT_OK


__all__ = ["register_script_args", "run_script_command"]
