from __future__ import annotations

"""Subprocess helpers with timeouts and process-group cleanup.

This module provides safe subprocess execution with:
- No shell=True (security)
- Separate stdout/stderr capture
- Timeouts that terminate the whole child process group
- Interrupt handling that never leaves a child running

The engine treats every child process as a blocking call: it waits for the
child to exit (or be killed) before doing anything else.
"""

import logging
import os
import shlex
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from time import perf_counter
from typing import Any, List, Mapping, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)

# Exit code used for a child killed on timeout (matches coreutils `timeout`).
TIMEOUT_EXIT_CODE = 124
# Exit code used when the executable cannot be spawned (matches POSIX shells).
NOT_FOUND_EXIT_CODE = 127


@dataclass(frozen=True)
class ExecResult:
    """Outcome of one child process."""

    argv: List[str]
    stdout: str
    stderr: str
    exit_code: int
    timed_out: bool = False
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


class ProcessRunner(Protocol):
    """Anything that can run an argv and report an :class:`ExecResult`."""

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[Path | str] = None,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        input: Optional[str] = None,
    ) -> ExecResult:
        ...


def _flatten_cmd(cmd: Any) -> List[str]:
    if isinstance(cmd, (list, tuple)):
        return [str(p) for p in cmd]
    return shlex.split(str(cmd))


def _popen_process_group_kwargs() -> dict[str, Any]:
    if os.name == "posix":
        return {"start_new_session": True}
    if os.name == "nt":
        creationflags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", None)
        if isinstance(creationflags, int):
            return {"creationflags": creationflags}
    return {}


def _terminate_process_group(proc: subprocess.Popen[Any]) -> None:
    if proc.poll() is not None:
        return
    if os.name == "posix":
        try:
            os.killpg(proc.pid, signal.SIGTERM)
        except (ProcessLookupError, PermissionError):
            proc.terminate()
        try:
            proc.wait(timeout=0.2)
        except subprocess.TimeoutExpired:
            pass
        if proc.poll() is None:
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except (ProcessLookupError, PermissionError):
                proc.kill()
        try:
            proc.wait(timeout=0.2)
        except subprocess.TimeoutExpired:
            logger.warning("Child process %s did not exit after SIGKILL", proc.pid)
        return

    proc.kill()
    try:
        proc.wait(timeout=0.2)
    except subprocess.TimeoutExpired:
        logger.warning("Child process %s did not exit after kill", proc.pid)


def _to_cwd(cwd: Optional[Path | str]) -> Optional[str]:
    """Convert Path or str cwd to str for subprocess."""
    if cwd is None:
        return None
    return str(cwd)


class SubprocessRunner:
    """Default :class:`ProcessRunner` backed by :mod:`subprocess`.

    Args:
        base_env: Environment the children start from. ``None`` inherits the
            current process environment.
        default_timeout: Timeout applied when ``run`` gets none.
    """

    def __init__(
        self,
        *,
        base_env: Optional[Mapping[str, str]] = None,
        default_timeout: Optional[float] = None,
    ) -> None:
        self.base_env = dict(base_env) if base_env is not None else None
        self.default_timeout = default_timeout

    def _child_env(self, env: Optional[Mapping[str, str]]) -> Optional[dict[str, str]]:
        if env is None:
            return self.base_env
        merged = dict(self.base_env if self.base_env is not None else os.environ)
        merged.update({str(k): str(v) for k, v in env.items()})
        return merged

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[Path | str] = None,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        input: Optional[str] = None,
    ) -> ExecResult:
        args = _flatten_cmd(argv)
        effective_timeout = timeout if timeout is not None else self.default_timeout
        start = perf_counter()
        logger.debug("exec %s (cwd=%s, timeout=%s)", args, cwd, effective_timeout)

        try:
            proc = subprocess.Popen(
                args,
                cwd=_to_cwd(cwd),
                env=self._child_env(env),
                stdin=subprocess.PIPE if input is not None else subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                **_popen_process_group_kwargs(),
            )
        except (FileNotFoundError, PermissionError, NotADirectoryError) as exc:
            logger.debug("spawn failed for %s: %s", args, exc)
            return ExecResult(
                argv=args,
                stdout="",
                stderr=str(exc),
                exit_code=NOT_FOUND_EXIT_CODE,
                duration=perf_counter() - start,
            )

        try:
            stdout, stderr = proc.communicate(input=input, timeout=effective_timeout)
        except subprocess.TimeoutExpired:
            _terminate_process_group(proc)
            try:
                stdout, stderr = proc.communicate(timeout=0.2)
            except subprocess.TimeoutExpired:
                stdout, stderr = "", ""
            logger.warning("Command timed out after %ss: %s", effective_timeout, args)
            message = (stderr or "").strip()
            return ExecResult(
                argv=args,
                stdout=stdout or "",
                stderr=(message + "\n" if message else "") + "Command timed out",
                exit_code=TIMEOUT_EXIT_CODE,
                timed_out=True,
                duration=perf_counter() - start,
            )
        except KeyboardInterrupt:
            # Never leave an orphaned child behind on user interrupt.
            _terminate_process_group(proc)
            raise

        result = ExecResult(
            argv=args,
            stdout=stdout or "",
            stderr=stderr or "",
            exit_code=proc.returncode if proc.returncode is not None else 0,
            duration=perf_counter() - start,
        )
        logger.debug("exit %s in %.2fs: %s", result.exit_code, result.duration, args)
        return result


__all__ = [
    "TIMEOUT_EXIT_CODE",
    "NOT_FOUND_EXIT_CODE",
    "ExecResult",
    "ProcessRunner",
    "SubprocessRunner",
]
