from __future__ import annotations

import sys
from pathlib import Path

import pytest

from worktree_wrangler.core.utils.subprocess import (
    NOT_FOUND_EXIT_CODE,
    TIMEOUT_EXIT_CODE,
    SubprocessRunner,
)


def test_captures_stdout_and_stderr_separately(tmp_path: Path) -> None:
    result = SubprocessRunner().run(
        [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"],
        cwd=tmp_path,
    )

    assert result.stdout.strip() == "out"
    assert result.stderr.strip() == "err"
    assert result.exit_code == 3
    assert not result.ok
    assert not result.timed_out


def test_missing_executable_reports_127() -> None:
    result = SubprocessRunner().run(["definitely-not-a-real-binary-xyz"])

    assert result.exit_code == NOT_FOUND_EXIT_CODE
    assert result.stderr


@pytest.mark.slow
def test_timeout_kills_child_and_reports_124() -> None:
    result = SubprocessRunner().run([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.5)

    assert result.timed_out
    assert result.exit_code == TIMEOUT_EXIT_CODE
    assert "timed out" in result.stderr
    assert result.duration < 10


def test_env_is_layered_over_base_env(tmp_path: Path) -> None:
    runner = SubprocessRunner(base_env={"PATH": "/usr/bin:/bin", "BASE_ONLY": "1"})
    result = runner.run(
        [sys.executable, "-c", "import os; print(os.environ.get('BASE_ONLY'), os.environ.get('EXTRA'))"],
        env={"EXTRA": "2"},
    )

    assert result.stdout.split() == ["1", "2"]


def test_input_is_piped_to_stdin() -> None:
    result = SubprocessRunner().run([sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"], input="hello")

    assert result.ok
    assert result.stdout.strip() == "HELLO"


def test_stdin_is_closed_when_no_input_given() -> None:
    result = SubprocessRunner().run([sys.executable, "-c", "import sys; print(repr(sys.stdin.read()))"], timeout=10)

    assert result.ok
    assert result.stdout.strip() == "''"
