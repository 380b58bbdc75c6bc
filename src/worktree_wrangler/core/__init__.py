"""Core library for Worktree Wrangler: resolution, inventory and lifecycle."""
