"""
Worktree Wrangler - multi-project Git worktree manager

Manages Git worktrees across several projects, tracks recently visited
worktrees, and copies pull-request links to the clipboard.
"""

__version__ = "2.0.0a1"
__all__ = ["__version__"]
