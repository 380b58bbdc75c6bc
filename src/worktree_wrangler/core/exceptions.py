from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced by Worktree Wrangler."""

    INVALID_NAME = "invalid_name"
    INVALID_LOCATION = "invalid_location"
    PROJECT_NOT_FOUND = "project_not_found"
    WORKTREE_NOT_FOUND = "worktree_not_found"
    ALREADY_EXISTS = "already_exists"
    GIT_OPERATION_FAILED = "git_operation_failed"
    SCRIPT_NOT_EXECUTABLE = "script_not_executable"
    SCRIPT_EXECUTION_ERROR = "script_execution_error"
    SETUP_SCRIPT_FAILED = "setup_script_failed"
    HISTORY_WRITE_FAILED = "history_write_failed"
    FILESYSTEM_ERROR = "filesystem_error"
    INVALID_CONFIG = "invalid_config"
    PR_NOT_FOUND = "pr_not_found"
    GITHUB_NOT_AUTHENTICATED = "github_not_authenticated"
    CLIPBOARD_UNAVAILABLE = "clipboard_unavailable"
    CLIPBOARD_FAILED = "clipboard_failed"
    TOOL_NOT_FOUND = "tool_not_found"

    @property
    def is_warning(self) -> bool:
        """True for kinds that never fail the primary operation."""
        return self in (ErrorKind.SETUP_SCRIPT_FAILED, ErrorKind.HISTORY_WRITE_FAILED)


class WranglerError(Exception):
    """Single structured error type for Worktree Wrangler.

    Callers branch on ``kind`` rather than on subclasses. Payload fields such
    as ``stderr``, ``exit_code`` or ``script_path`` live in ``context``.
    """

    kind: ErrorKind
    context: Dict[str, Any]

    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        context: Mapping[str, Any] | None = None,
        cause: "WranglerError | None" = None,
    ) -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        # Store a shallow copy to avoid accidental mutation.
        self.context = dict(context) if context is not None else {}
        self.cause = cause

    @property
    def stderr(self) -> str:
        return str(self.context.get("stderr") or "")

    @property
    def exit_code(self) -> int | None:
        value = self.context.get("exit_code")
        return int(value) if value is not None else None

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        payload: Dict[str, Any] = {
            "message": str(self),
            "code": self.kind.value,
            "context": {k: (str(v) if not isinstance(v, (int, float, bool, type(None))) else v)
                        for k, v in self.context.items()},
        }
        if self.cause is not None:
            payload["cause"] = self.cause.to_json_error()
        return payload

    def __repr__(self) -> str:
        return f"WranglerError({self.kind.name}, {str(self)!r})"


def invalid_name(kind_label: str, value: str) -> WranglerError:
    return WranglerError(
        ErrorKind.INVALID_NAME,
        f"Invalid {kind_label} name: {value!r}",
        context={"name": value, "label": kind_label},
    )


def project_not_found(project: str) -> WranglerError:
    return WranglerError(
        ErrorKind.PROJECT_NOT_FOUND,
        f"Project not found: {project}",
        context={"project": project},
    )


def worktree_not_found(project: str, worktree: str) -> WranglerError:
    return WranglerError(
        ErrorKind.WORKTREE_NOT_FOUND,
        f"Worktree not found: {project}/{worktree}",
        context={"project": project, "worktree": worktree},
    )


def git_operation_failed(message: str, *, stderr: str, exit_code: int, argv: Any = None) -> WranglerError:
    ctx: Dict[str, Any] = {"stderr": stderr, "exit_code": exit_code}
    if argv is not None:
        ctx["argv"] = " ".join(str(a) for a in argv)
    return WranglerError(ErrorKind.GIT_OPERATION_FAILED, message, context=ctx)


def script_execution_error(script_path: Any, *, stderr: str, exit_code: int) -> WranglerError:
    return WranglerError(
        ErrorKind.SCRIPT_EXECUTION_ERROR,
        f"Script execution failed: {script_path} (exit code {exit_code})",
        context={"script_path": str(script_path), "stderr": stderr, "exit_code": exit_code},
    )


__all__ = [
    "ErrorKind",
    "WranglerError",
    "invalid_name",
    "project_not_found",
    "worktree_not_found",
    "git_operation_failed",
    "script_execution_error",
]
