"""Test helper modules for the Worktree Wrangler test suite.

- git_helpers: real-git repository setup (init, commit, worktrees, orphans)
- runners: SpyRunner and FakeClipboard test doubles
"""
