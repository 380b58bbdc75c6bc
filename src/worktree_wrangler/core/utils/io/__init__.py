"""I/O utilities for Worktree Wrangler.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management, text I/O
- YAML: read/write through the atomic writer
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    read_text,
)
from .yaml import (
    parse_yaml_string,
    read_yaml,
    write_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    # yaml
    "read_yaml",
    "write_yaml",
    "parse_yaml_string",
]
