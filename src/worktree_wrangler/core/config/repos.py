"""Per-repository automation store (``<data_dir>/repos/<project>/config.yml``)."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError, invalid_name
from worktree_wrangler.core.schemas import validate_payload
from worktree_wrangler.core.utils.io import read_yaml, write_yaml
from worktree_wrangler.core.utils.paths import expand_tilde
from worktree_wrangler.core.utils.validation import is_valid_project_name

from .models import PerRepositoryConfig

logger = logging.getLogger(__name__)

REPO_CONFIG_FILE = "config.yml"
_SCRIPT_KEYS = ("setup_script", "archive_script")


class RepoConfigStore:
    """Reads and writes :class:`PerRepositoryConfig` keyed by project name."""

    def __init__(self, repos_dir: Path) -> None:
        self.repos_dir = Path(repos_dir)

    def _path_for(self, project: str) -> Path:
        if not is_valid_project_name(project):
            raise invalid_name("project", project)
        return self.repos_dir / project / REPO_CONFIG_FILE

    def _read(self, project: str) -> Dict[str, Any]:
        path = self._path_for(project)
        try:
            data = read_yaml(path, default={}, raise_on_error=path.exists())
        except (OSError, yaml.YAMLError) as exc:
            raise WranglerError(
                ErrorKind.INVALID_CONFIG,
                f"Unreadable repository config {path}: {exc}",
                context={"source": str(path)},
            ) from exc
        if not isinstance(data, dict):
            raise WranglerError(
                ErrorKind.INVALID_CONFIG,
                f"Repository config must be a mapping: {path}",
                context={"source": str(path)},
            )
        validate_payload(data, "repo-config", source=str(path))
        return data

    def get(self, project: str) -> PerRepositoryConfig:
        """Return the project's automation config (empty when none is stored)."""
        data = self._read(project)

        def _script(key: str) -> Optional[Path]:
            raw = data.get(key)
            return expand_tilde(raw) if raw else None

        return PerRepositoryConfig(
            setup_script=_script("setup_script"),
            archive_script=_script("archive_script"),
        )

    def set_script(self, project: str, kind: str, script: Optional[Path | str]) -> PerRepositoryConfig:
        """Set (or clear with ``None``) the ``setup`` or ``archive`` script."""
        key = f"{kind}_script"
        if key not in _SCRIPT_KEYS:
            raise ValueError(f"Unknown script kind: {kind}")
        data = self._read(project)
        if script is None:
            data.pop(key, None)
        else:
            data[key] = str(expand_tilde(script).absolute())
        validate_payload(data, "repo-config", source=str(self._path_for(project)))
        write_yaml(self._path_for(project), data)
        logger.info("Project %s %s set to %s", project, key, data.get(key))
        return self.get(project)


__all__ = ["RepoConfigStore", "REPO_CONFIG_FILE"]
