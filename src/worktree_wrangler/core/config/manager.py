from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from worktree_wrangler.core.exceptions import ErrorKind, WranglerError
from worktree_wrangler.core.schemas import validate_payload
from worktree_wrangler.core.utils.io import read_text, write_yaml
from worktree_wrangler.core.utils.io.yaml import parse_yaml_string
from worktree_wrangler.core.utils.merge import deep_merge
from worktree_wrangler.core.utils.paths import APP_NAME, expand_tilde
from worktree_wrangler.data import read_yaml as read_bundled_yaml

from .models import CONFIG_FILE_NAME, WranglerConfig

logger = logging.getLogger(__name__)

ENV_PREFIX = "WRANGLER_"
DATA_DIR_ENV = "WRANGLER_DATA_DIR"


def resolve_data_dir(environ: Mapping[str, str]) -> Path:
    """Return the application data directory.

    Precedence: ``WRANGLER_DATA_DIR``, ``$XDG_DATA_HOME/worktree-wrangler``,
    ``~/.local/share/worktree-wrangler``.
    """
    explicit = (environ.get(DATA_DIR_ENV) or "").strip()
    if explicit:
        return expand_tilde(explicit).absolute()
    xdg = (environ.get("XDG_DATA_HOME") or "").strip()
    if xdg:
        return expand_tilde(xdg).absolute() / APP_NAME
    home = (environ.get("HOME") or "").strip()
    base = Path(home) if home else Path.home()
    return base / ".local" / "share" / APP_NAME


def _parse_key_value_lines(text: str) -> Dict[str, Any]:
    """Parse the legacy ``key=value`` config format."""
    data: Dict[str, Any] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            raise ValueError(f"Malformed config line: {raw!r}")
        key, value = line.split("=", 1)
        data[key.strip()] = value.strip().strip('"').strip("'")
    return data


class ConfigManager:
    """Load, merge, and validate Worktree Wrangler configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: WRANGLER_<section>__<key>
    2. User config file: <data_dir>/config (YAML; legacy key=value accepted)
    3. Bundled defaults: worktree_wrangler.data/config/defaults.yaml

    This class is the only place that reads the process environment.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.environ: Mapping[str, str] = dict(os.environ if environ is None else environ)
        self.data_dir = Path(data_dir) if data_dir is not None else resolve_data_dir(self.environ)

    @property
    def config_file(self) -> Path:
        return self.data_dir / CONFIG_FILE_NAME

    # ========== Sources ==========

    def load_user_config(self) -> Dict[str, Any]:
        """Return the user config file as a mapping ({} when absent)."""
        path = self.config_file
        if not path.exists():
            return {}
        text = read_text(path)
        if not text.strip():
            return {}
        data = parse_yaml_string(text, default=None)
        if isinstance(data, dict):
            return data
        # Older installs wrote `projects_dir=/path` lines.
        try:
            return _parse_key_value_lines(text)
        except ValueError as exc:
            raise WranglerError(
                ErrorKind.INVALID_CONFIG,
                f"Invalid configuration in {path}: {exc}",
                context={"source": str(path)},
            ) from exc

    # ========== Environment overrides ==========

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        if value.strip().lower() in {"null", "none"}:
            return None
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        known = set(read_bundled_yaml("config", "defaults.yaml"))
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == DATA_DIR_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            segs = [s.lower() for s in raw.split("__")]
            if not raw or any(not s for s in segs):
                logger.warning("Ignoring malformed override %s", key)
                continue
            # Script variables (WRANGLER_PROJECT, ...) share the prefix.
            if segs[0] not in known:
                continue
            yield segs, self._coerce_type(self.environ[key])

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> Dict[str, Any]:
        result = dict(cfg)
        for path, value in self._iter_env_overrides():
            result = self._set_nested(result, path, value)
        return result

    @staticmethod
    def _set_nested(root: Dict[str, Any], path: List[str], value: Any) -> Dict[str, Any]:
        override: Dict[str, Any] = {path[-1]: value}
        for part in reversed(path[:-1]):
            override = {part: override}
        return deep_merge(root, override)

    # ========== Loading ==========

    def load_raw(self) -> Dict[str, Any]:
        """Merged (defaults + user + env) and validated mapping."""
        cfg = deep_merge(read_bundled_yaml("config", "defaults.yaml"), self.load_user_config())
        cfg = self.apply_env_overrides(cfg)
        validate_payload(cfg, "config", source=str(self.config_file))
        return cfg

    def _resolve_dir(self, raw: str) -> Path:
        p = expand_tilde(raw)
        if not p.is_absolute():
            p = Path.home() / p
        return p

    def load(self) -> WranglerConfig:
        """Build the immutable :class:`WranglerConfig` for this invocation."""
        cfg = self.load_raw()
        projects_dir = self._resolve_dir(str(cfg["projects_dir"]))
        worktrees_raw = str(cfg.get("worktrees_dir") or "").strip()
        worktrees_dir = self._resolve_dir(worktrees_raw) if worktrees_raw else projects_dir / "worktrees"
        history = cfg.get("history") or {}
        timeouts = cfg.get("timeouts") or {}
        logging_cfg = cfg.get("logging") or {}
        return WranglerConfig(
            data_dir=self.data_dir,
            projects_dir=projects_dir,
            worktrees_dir=worktrees_dir,
            history_max_entries=int(history.get("max_entries", 50)),
            history_max_age_days=history.get("max_age_days"),
            git_timeout=float(timeouts.get("git_seconds", 60)),
            script_timeout=float(timeouts.get("script_seconds", 300)),
            tool_timeout=float(timeouts.get("tool_seconds", 15)),
            log_level=str(logging_cfg.get("level", "INFO")),
        )

    # ========== Persistence ==========

    def get(self, key: str) -> Any:
        """Return a dotted key from the merged configuration."""
        cur: Any = self.load_raw()
        for part in key.split("."):
            if not isinstance(cur, dict) or part not in cur:
                raise KeyError(key)
            cur = cur[part]
        return cur

    def set(self, key: str, value: Any) -> Path:
        """Persist one dotted key into the user config file."""
        path = [p for p in key.split(".") if p]
        if not path:
            raise WranglerError(ErrorKind.INVALID_CONFIG, f"Invalid config key: {key!r}")
        if isinstance(value, str):
            value = self._coerce_type(value)
        user = self._set_nested(self.load_user_config(), path, value)
        merged = deep_merge(read_bundled_yaml("config", "defaults.yaml"), user)
        validate_payload(merged, "config", source=f"{key}={value!r}")
        write_yaml(self.config_file, user)
        logger.info("Config %s set to %r", key, value)
        return self.config_file

    def unset(self, key: str) -> bool:
        """Remove one dotted key from the user config file."""
        user = self.load_user_config()
        parts = key.split(".")
        cur: Any = user
        for part in parts[:-1]:
            if not isinstance(cur, dict) or part not in cur:
                return False
            cur = cur[part]
        if not isinstance(cur, dict) or parts[-1] not in cur:
            return False
        del cur[parts[-1]]
        write_yaml(self.config_file, user)
        return True


__all__ = ["ConfigManager", "resolve_data_dir", "ENV_PREFIX", "DATA_DIR_ENV"]
