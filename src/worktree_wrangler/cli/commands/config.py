"""
Worktree Wrangler config command.

SUMMARY: Show or change configuration values
"""

from __future__ import annotations

import argparse

from worktree_wrangler.cli import EXIT_OK, OutputFormatter, add_json_flag, get_config_manager, report_error
from worktree_wrangler.core.exceptions import ErrorKind, WranglerError

SUMMARY = "Show or change configuration values"

ACTIONS = ("show", "get", "set", "unset", "path")


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "action",
        nargs="?",
        default="show",
        choices=ACTIONS,
        help="show (default), get KEY, set KEY VALUE, unset KEY, or path",
    )
    parser.add_argument("key", nargs="?", help="Dotted key, e.g. history.max_entries")
    parser.add_argument("value", nargs="?", help="New value (for set)")
    add_json_flag(parser)


def _flatten(data: dict, prefix: str = "") -> list[tuple[str, object]]:
    rows: list[tuple[str, object]] = []
    for key in sorted(data):
        value = data[key]
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, dotted + "."))
        else:
            rows.append((dotted, value))
    return rows


def _require(value: str | None, what: str) -> str:
    if not value:
        raise WranglerError(ErrorKind.INVALID_CONFIG, f"Missing {what}")
    return value


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    manager = get_config_manager(args)

    try:
        if args.action == "path":
            formatter.success(
                {"config_file": str(manager.config_file), "data_dir": str(manager.data_dir)},
                str(manager.config_file),
            )
            return EXIT_OK

        if args.action == "show":
            merged = manager.load_raw()
            if formatter.json_mode:
                formatter.json_output(merged)
            else:
                for key, value in _flatten(merged):
                    formatter.text(f"{key} = {'' if value is None else value}")
            return EXIT_OK

        key = _require(args.key, "config key")
        if args.action == "get":
            try:
                value = manager.get(key)
            except KeyError:
                raise WranglerError(
                    ErrorKind.INVALID_CONFIG,
                    f"Unknown config key: {key}",
                    context={"key": key},
                ) from None
            formatter.success({"key": key, "value": value}, "" if value is None else str(value))
            return EXIT_OK

        if args.action == "set":
            path = manager.set(key, _require(args.value, "config value"))
            formatter.success({"key": key, "value": manager.get(key), "file": str(path)}, f"Set {key}")
            return EXIT_OK

        removed = manager.unset(key)
        message = f"Unset {key}" if removed else f"{key} was not set"
        formatter.success({"key": key, "removed": removed}, message)
        return EXIT_OK
    except WranglerError as e:
        return report_error(formatter, e)
