"""End-to-end tests of the ``worktree-wrangler`` command line."""
from __future__ import annotations

import argparse
import json
from pathlib import Path

import pytest

from worktree_wrangler import __version__
from worktree_wrangler.cli._dispatcher import build_parser, main
from worktree_wrangler.core.config import WranglerConfig

pytestmark = pytest.mark.requires_git


@pytest.fixture
def cli_env(config: WranglerConfig, acme_repo: Path, monkeypatch: pytest.MonkeyPatch) -> WranglerConfig:
    monkeypatch.setenv("WRANGLER_PROJECTS_DIR", str(config.projects_dir))
    monkeypatch.setenv("WRANGLER_WORKTREES_DIR", str(config.worktrees_dir))
    return config


def _json(text: str) -> dict:
    return json.loads(text)


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_every_command_is_registered() -> None:
    parser = build_parser()
    choices = next(a for a in parser._actions if isinstance(a, argparse._SubParsersAction)).choices

    for name in (
        "create",
        "worktree",
        "list",
        "status",
        "recent",
        "remove",
        "cleanup",
        "copy-pr-link",
        "base-repo",
        "config",
        "setup-script",
        "archive-script",
    ):
        assert name in choices


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "worktree-wrangler" in capsys.readouterr().out


def test_create_visit_list_remove(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["create", "acme", "feature-x", "--json"]) == 0
    created = _json(capsys.readouterr().out)
    expected_path = str(cli_env.worktrees_dir / "acme-feature-x")
    assert created["status"] == "success"
    assert created["path"] == expected_path
    assert created["branch"] == "feature-x"

    assert main(["worktree", "acme", "feature-x"]) == 0
    assert capsys.readouterr().out.strip() == expected_path

    assert main(["list", "acme", "--json"]) == 0
    listed = _json(capsys.readouterr().out)
    assert listed["total"] == 1
    assert listed["worktrees"][0]["name"] == "feature-x"
    assert listed["worktrees"][0]["orphaned"] is False

    assert main(["recent", "--json"]) == 0
    recent = _json(capsys.readouterr().out)
    assert [(e["project"], e["worktree"], e["exists"]) for e in recent["entries"]] == [
        ("acme", "feature-x", True)
    ]

    assert main(["remove", "acme", "feature-x"]) == 0
    assert "Removed worktree acme/feature-x" in capsys.readouterr().out
    assert not Path(expected_path).exists()


def test_list_projects(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["list", "--json"]) == 0
    payload = _json(capsys.readouterr().out)
    assert [p["name"] for p in payload["projects"]] == ["acme"]


def test_invalid_name_exit_code_and_json_error(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["create", "acme", "has space", "--json"]) == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    error = _json(captured.err)
    assert error["error"] == "invalid_name"
    assert error["context"]["name"] == "has space"


def test_not_found_exit_code(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["remove", "acme", "missing"]) == 3
    assert "Worktree not found: acme/missing" in capsys.readouterr().err

    assert main(["base-repo", "ghost"]) == 3


def test_git_failure_prints_stderr(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["create", "acme", "again", "--branch", "main"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert "main" in err


def test_status_and_base_repo(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    main(["create", "acme", "x"])
    capsys.readouterr()

    assert main(["status", "acme", "x", "--json"]) == 0
    status = _json(capsys.readouterr().out)
    assert status["branch"] == "x"
    assert status["status"]["clean"] is True

    assert main(["base-repo", "acme"]) == 0
    assert capsys.readouterr().out.strip() == str(cli_env.projects_dir / "acme")


def test_cleanup_dry_run(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    main(["create", "acme", "x"])
    capsys.readouterr()

    assert main(["cleanup", "acme", "--dry-run", "--json"]) == 0
    payload = _json(capsys.readouterr().out)
    assert payload["project"] == "acme"
    assert payload["dry_run"] is True
    assert payload["candidates"] == []


def test_setup_script_config_roundtrip(
    cli_env: WranglerConfig, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    script = tmp_path / "setup.sh"
    script.write_text("#!/bin/sh\ntouch .ready\n", encoding="utf-8")
    script.chmod(0o755)

    assert main(["setup-script", "acme", str(script)]) == 0
    capsys.readouterr()
    assert main(["setup-script", "acme", "--json"]) == 0
    assert _json(capsys.readouterr().out)["setup_script"] == str(script)

    assert main(["create", "acme", "ready", "--setup"]) == 0
    assert (cli_env.worktrees_dir / "acme-ready" / ".ready").exists()

    assert main(["setup-script", "acme", "--clear"]) == 0
    capsys.readouterr()
    assert main(["setup-script", "acme", "--json"]) == 0
    assert _json(capsys.readouterr().out)["setup_script"] is None


def test_missing_script_is_rejected(cli_env: WranglerConfig, tmp_path: Path) -> None:
    assert main(["archive-script", "acme", str(tmp_path / "nope.sh")]) == 1


def test_config_set_get_unset(cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["config", "set", "history.max_entries", "10"]) == 0
    capsys.readouterr()

    assert main(["config", "get", "history.max_entries"]) == 0
    assert capsys.readouterr().out.strip() == "10"

    assert main(["config", "set", "history.max_entries", "0"]) == 2
    assert main(["config", "get", "no.such.key"]) == 2

    assert main(["config", "unset", "history.max_entries", "--json"]) == 0
    capsys.readouterr()
    assert main(["config", "get", "history.max_entries"]) == 0
    assert capsys.readouterr().out.strip() == "50"


def test_invalid_environment_config_fails_commands(
    cli_env: WranglerConfig, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("WRANGLER_LOGGING__LEVEL", "LOUD")

    assert main(["list", "--json"]) == 2
    assert _json(capsys.readouterr().err)["error"] == "invalid_config"


def test_commands_log_to_data_dir_not_console(
    cli_env: WranglerConfig, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(["--verbose", "create", "acme", "logged"]) == 0
    captured = capsys.readouterr()

    log = (cli_env.data_dir / "wrangler.log").read_text(encoding="utf-8")
    assert "Created worktree acme/logged" in log
    assert "DEBUG" in log
    assert "Created worktree acme/logged" not in captured.err
