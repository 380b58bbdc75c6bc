"""Configuration records."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

CONFIG_FILE_NAME = "config"
REPOS_DIR_NAME = "repos"
RECENT_FILE_NAME = "recent"
LOG_FILE_NAME = "wrangler.log"


@dataclass(frozen=True)
class WranglerConfig:
    """Resolved configuration, constructed once per invocation."""

    data_dir: Path
    projects_dir: Path
    worktrees_dir: Path
    history_max_entries: int = 50
    history_max_age_days: Optional[int] = 90
    git_timeout: float = 60.0
    script_timeout: float = 300.0
    tool_timeout: float = 15.0
    log_level: str = "INFO"

    @property
    def config_file(self) -> Path:
        return self.data_dir / CONFIG_FILE_NAME

    @property
    def repos_dir(self) -> Path:
        return self.data_dir / REPOS_DIR_NAME

    @property
    def recent_file(self) -> Path:
        return self.data_dir / RECENT_FILE_NAME

    @property
    def log_file(self) -> Path:
        return self.data_dir / LOG_FILE_NAME


@dataclass(frozen=True)
class PerRepositoryConfig:
    """Optional automation for one project."""

    setup_script: Optional[Path] = None
    archive_script: Optional[Path] = None

    def to_dict(self) -> dict:
        return {
            "setup_script": str(self.setup_script) if self.setup_script else None,
            "archive_script": str(self.archive_script) if self.archive_script else None,
        }


__all__ = [
    "CONFIG_FILE_NAME",
    "REPOS_DIR_NAME",
    "RECENT_FILE_NAME",
    "LOG_FILE_NAME",
    "WranglerConfig",
    "PerRepositoryConfig",
]
