"""Unified CLI output formatting utilities.

Every command prints through :class:`OutputFormatter`, which renders either
human-readable text or JSON. Diagnostics never go to stdout in JSON mode.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, Optional

from worktree_wrangler.core.exceptions import WranglerError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
        warnings: Iterable[WranglerError] = (),
    ) -> None:
        """Output success result.

        Args:
            data: Result data dictionary
            message: Human-readable success message (used in text mode)
            status: Status string for JSON output
            warnings: Non-fatal problems attached to the result
        """
        warnings = list(warnings)
        if self.json_mode:
            output = {"status": status, **data}
            if warnings:
                output["warnings"] = [w.to_json_error() for w in warnings]
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)
            self.warnings(warnings)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: Optional[str] = None,
    ) -> None:
        """Output error result to stderr.

        Args:
            error: The exception that occurred
            message: Optional human-readable message (defaults to str(error))
            error_code: Error code for JSON output (defaults to the error kind)
        """
        msg = message or str(error)
        if isinstance(error, WranglerError):
            code = error_code or error.kind.value
            context = error.to_json_error()["context"]
        else:
            code = error_code or "error"
            context = {}
        if self.json_mode:
            output: Dict[str, Any] = {"error": code, "message": msg}
            if context:
                output["context"] = context
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)
            stderr = context.get("stderr") if context else None
            if stderr:
                print(str(stderr).rstrip(), file=sys.stderr)

    def warnings(self, warnings: Iterable[WranglerError]) -> None:
        """Print warnings to stderr in text mode (JSON mode embeds them)."""
        if self.json_mode:
            return
        for warning in warnings:
            print(f"Warning: {warning}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        """Output raw JSON data."""
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        """Output plain text message (suppressed in JSON mode)."""
        if not self.json_mode:
            print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        """Output key-value pair in text mode.

        Args:
            key: Key name
            value: Value to display
            prefix: Line prefix (default: two spaces for indentation)
        """
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")


__all__ = [
    "OutputFormatter",
]
