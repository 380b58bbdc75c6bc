"""Shared CLI utility functions.

This module provides common utilities used across CLI commands to reduce
duplication and ensure consistent behavior.
"""
from __future__ import annotations

import argparse
from datetime import datetime, timezone
from typing import Optional

from worktree_wrangler.core.config import ConfigManager, WranglerConfig
from worktree_wrangler.core.context import WranglerContext
from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.result import Result

from ._output import OutputFormatter

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2
EXIT_NOT_FOUND = 3

_INVALID_INPUT_KINDS = frozenset({ErrorKind.INVALID_NAME, ErrorKind.INVALID_CONFIG})
_NOT_FOUND_KINDS = frozenset(
    {ErrorKind.PROJECT_NOT_FOUND, ErrorKind.WORKTREE_NOT_FOUND, ErrorKind.PR_NOT_FOUND}
)


def exit_code_for(error: WranglerError) -> int:
    """Map an error kind to the process exit code."""
    if error.kind in _INVALID_INPUT_KINDS:
        return EXIT_INVALID_INPUT
    if error.kind in _NOT_FOUND_KINDS:
        return EXIT_NOT_FOUND
    return EXIT_FAILURE


def report_error(formatter: OutputFormatter, error: WranglerError) -> int:
    """Print ``error`` and return its exit code."""
    formatter.error(error)
    return exit_code_for(error)


def get_config_manager(args: argparse.Namespace) -> ConfigManager:
    manager = getattr(args, "_config_manager", None)
    return manager if manager is not None else ConfigManager()


def get_config(args: argparse.Namespace) -> WranglerConfig:
    """Return the configuration loaded by the dispatcher (or load it now)."""
    error: Optional[WranglerError] = getattr(args, "_config_error", None)
    if error is not None:
        raise error
    config = getattr(args, "_config", None)
    if config is None:
        config = get_config_manager(args).load()
    return config


def get_context(args: argparse.Namespace) -> WranglerContext:
    """Build the component graph for this invocation.

    Raises:
        WranglerError: ``INVALID_CONFIG`` when the configuration is unusable.
    """
    ctx = getattr(args, "_context", None)
    if ctx is not None:
        return ctx
    return WranglerContext.build(get_config(args))


def finish(formatter: OutputFormatter, result: Result, data: dict, message: str) -> int:
    """Render an engine result and return the exit code."""
    if not result.ok:
        return report_error(formatter, result.error)
    formatter.success(data, message, warnings=result.warnings)
    return EXIT_OK


def format_age(when: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Render a timestamp as a short relative age ("5m ago", "3d ago")."""
    if when is None:
        return "unknown"
    now = now or datetime.now(timezone.utc)
    seconds = max(int((now - when).total_seconds()), 0)
    for unit, size in (("d", 86400), ("h", 3600), ("m", 60)):
        if seconds >= size:
            return f"{seconds // size}{unit} ago"
    return "just now"


__all__ = [
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_INVALID_INPUT",
    "EXIT_NOT_FOUND",
    "exit_code_for",
    "report_error",
    "get_config_manager",
    "get_config",
    "get_context",
    "finish",
    "format_age",
]
