"""
Bundled data resource helpers.

Provides access to the default configuration and JSON schemas shipped with
the package using importlib.resources.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a bundled data file or directory.

    Example:
        >>> get_data_path("config", "defaults.yaml")
        PosixPath('/path/to/worktree_wrangler/data/config/defaults.yaml')
    """
    pkg = resources.files("worktree_wrangler.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


@lru_cache(maxsize=16)
def read_yaml(subpackage: str, filename: str) -> dict[str, Any]:
    """Read a bundled YAML mapping (cached)."""
    path = get_data_path(subpackage, filename)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Bundled YAML must be a mapping: {path}")
    return data


__all__ = ["get_data_path", "read_yaml"]
