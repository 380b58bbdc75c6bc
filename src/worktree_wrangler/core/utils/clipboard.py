"""Clipboard detection and copying via the platform's clipboard command."""
from __future__ import annotations

import logging
import shutil
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from .subprocess import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

# Lookup order: macOS, X11, Wayland, Windows.
CLIPBOARD_COMMANDS: Tuple[Tuple[str, ...], ...] = (
    ("pbcopy",),
    ("xclip", "-selection", "clipboard"),
    ("wl-copy",),
    ("clip",),
)


class ClipboardSink(Protocol):
    def copy(self, text: str) -> None:
        ...


def detect_clipboard_command(
    which: Callable[[str], Optional[str]] = shutil.which,
    candidates: Sequence[Sequence[str]] = CLIPBOARD_COMMANDS,
) -> Optional[List[str]]:
    """Return the argv of the first clipboard command found on PATH."""
    for argv in candidates:
        if which(argv[0]):
            return list(argv)
    return None


class SystemClipboard:
    """Copies text by piping it into the detected clipboard command."""

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        *,
        timeout: float = 15.0,
        which: Callable[[str], Optional[str]] = shutil.which,
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.timeout = timeout
        self._which = which

    def copy(self, text: str) -> None:
        argv = detect_clipboard_command(self._which)
        if argv is None:
            raise WranglerError(
                ErrorKind.CLIPBOARD_UNAVAILABLE,
                "No clipboard command available. Install pbcopy (macOS), "
                "xclip (Linux), or wl-copy (Wayland)",
            )
        result = self.runner.run(argv, input=text, timeout=self.timeout)
        if not result.ok:
            raise WranglerError(
                ErrorKind.CLIPBOARD_FAILED,
                f"Clipboard command failed: {result.stderr.strip() or argv[0]}",
                context={"command": argv[0], "stderr": result.stderr, "exit_code": result.exit_code},
            )
        logger.debug("Copied %d characters with %s", len(text), argv[0])


__all__ = ["CLIPBOARD_COMMANDS", "ClipboardSink", "SystemClipboard", "detect_clipboard_command"]
