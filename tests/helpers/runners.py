"""Test doubles for the process runner and clipboard."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from worktree_wrangler.core.utils.subprocess import ExecResult


class SpyRunner:
    """ProcessRunner that records calls and replays scripted results.

    ``responses`` maps the first two argv words (e.g. ``"gh pr"``) or the
    executable name to a result factory; anything else succeeds with empty
    output.
    """

    def __init__(self, responses: Optional[Dict[str, Callable[[List[str]], ExecResult]]] = None) -> None:
        self.calls: List[dict] = []
        self.responses = dict(responses or {})

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[Path | str] = None,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        input: Optional[str] = None,
    ) -> ExecResult:
        args = [str(a) for a in argv]
        self.calls.append({"argv": args, "cwd": cwd, "env": dict(env or {}), "timeout": timeout, "input": input})
        for key in (" ".join(args[:2]), args[0] if args else ""):
            if key in self.responses:
                return self.responses[key](args)
        return ExecResult(argv=args, stdout="", stderr="", exit_code=0)

    @property
    def argvs(self) -> List[List[str]]:
        return [c["argv"] for c in self.calls]


def result(stdout: str = "", stderr: str = "", exit_code: int = 0) -> Callable[[List[str]], ExecResult]:
    return lambda argv: ExecResult(argv=argv, stdout=stdout, stderr=stderr, exit_code=exit_code)


class FakeClipboard:
    def __init__(self) -> None:
        self.copied: List[str] = []

    def copy(self, text: str) -> None:
        self.copied.append(text)
