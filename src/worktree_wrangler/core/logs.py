from __future__ import annotations

import logging
import sys
from pathlib import Path

from worktree_wrangler.core.utils.io import ensure_directory

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED_LOG_PATH: str | None = None
_FILE_HANDLER: logging.Handler | None = None
_NULL_HANDLER_INSTALLED: bool = False


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else logging.INFO


def _close_quietly(handler: logging.Handler) -> None:
    try:
        handler.close()
    except (OSError, ValueError):
        pass


def configure_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Send stdlib logging to `log_path` only (no stdout/stderr handler).

    Idempotent per-process: if already configured for the same file, only the
    level is updated.
    """
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER

    resolved = str(Path(log_path).resolve())
    root = logging.getLogger()
    root.setLevel(_level_from_name(level))
    if _CONFIGURED_LOG_PATH == resolved and _FILE_HANDLER is not None:
        _FILE_HANDLER.setLevel(_level_from_name(level))
        return

    ensure_directory(Path(resolved).parent)

    # FileHandler is also a StreamHandler, so only drop the console ones.
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) in (sys.stdout, sys.stderr):
            root.removeHandler(h)
            _close_quietly(h)

    if _FILE_HANDLER is not None:
        root.removeHandler(_FILE_HANDLER)
        _close_quietly(_FILE_HANDLER)
        _FILE_HANDLER = None

    fh = logging.FileHandler(resolved, encoding="utf-8")
    fh.setLevel(_level_from_name(level))
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    _FILE_HANDLER = fh
    _CONFIGURED_LOG_PATH = resolved


def suppress_lastresort() -> None:
    """Keep logging's implicit stderr handler away from command output.

    Used when the log file cannot be opened: a NullHandler on the root logger
    stops WARNING records from leaking into ``--json`` output.
    """
    global _NULL_HANDLER_INSTALLED

    root = logging.getLogger()
    if root.handlers or _NULL_HANDLER_INSTALLED:
        return
    root.addHandler(logging.NullHandler())
    _NULL_HANDLER_INSTALLED = True


def reset_logging_for_tests() -> None:
    """Test-only: clear configured handlers."""
    global _CONFIGURED_LOG_PATH, _FILE_HANDLER, _NULL_HANDLER_INSTALLED
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
        _close_quietly(h)
    _CONFIGURED_LOG_PATH = None
    _FILE_HANDLER = None
    _NULL_HANDLER_INSTALLED = False


__all__ = ["LOG_FORMAT", "configure_logging", "suppress_lastresort", "reset_logging_for_tests"]
