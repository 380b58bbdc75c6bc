"""Configuration for Worktree Wrangler.

``ConfigManager`` builds one immutable :class:`WranglerConfig` at startup;
every component receives it explicitly instead of reading the environment.
``RepoConfigStore`` holds the optional per-repository setup/archive scripts.
"""
from .manager import ConfigManager, resolve_data_dir
from .models import PerRepositoryConfig, WranglerConfig
from .repos import RepoConfigStore

__all__ = [
    "ConfigManager",
    "PerRepositoryConfig",
    "RepoConfigStore",
    "WranglerConfig",
    "resolve_data_dir",
]
