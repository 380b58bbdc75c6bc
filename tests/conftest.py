from __future__ import annotations

import os
import shutil
import sys
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'worktree_wrangler' and tests/ as 'helpers'
for p in (SRC_ROOT, TESTS_ROOT):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))


from worktree_wrangler.core.config import WranglerConfig
from worktree_wrangler.core.context import WranglerContext
from worktree_wrangler.core.logs import reset_logging_for_tests
from helpers.git_helpers import git_commit, git_init
from helpers.runners import FakeClipboard, SpyRunner


def pytest_collection_modifyitems(config, items):  # type: ignore[no-untyped-def]
    """Skip real-git tests when no git binary is available."""
    if shutil.which("git"):
        return
    skip = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if "requires_git" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point every config source at tmp_path and drop leaked overrides."""
    for key in list(os.environ):
        if key.startswith("WRANGLER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("WRANGLER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
    # Hermetic git: ignore the developer's global/system config.
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", os.devnull)
    monkeypatch.setenv("GIT_TERMINAL_PROMPT", "0")
    yield
    reset_logging_for_tests()


@pytest.fixture
def config(tmp_path: Path) -> WranglerConfig:
    projects_dir = tmp_path / "projects"
    worktrees_dir = tmp_path / "wt"
    projects_dir.mkdir()
    worktrees_dir.mkdir()
    return WranglerConfig(
        data_dir=tmp_path / "data",
        projects_dir=projects_dir,
        worktrees_dir=worktrees_dir,
        git_timeout=30.0,
        script_timeout=30.0,
        tool_timeout=5.0,
    )


@pytest.fixture
def acme_repo(config: WranglerConfig) -> Path:
    """A real repository at <projects_dir>/acme with one commit on main."""
    repo = config.projects_dir / "acme"
    repo.mkdir()
    git_init(repo)
    (repo / "README.md").write_text("# acme\n", encoding="utf-8")
    git_commit(repo, "init")
    return repo


@pytest.fixture
def ctx(config: WranglerConfig, acme_repo: Path) -> WranglerContext:
    return WranglerContext.build(config, clipboard=FakeClipboard())


@pytest.fixture
def spy_runner() -> SpyRunner:
    return SpyRunner()
