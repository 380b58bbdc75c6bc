"""Top-level commands (auto-discovered by the dispatcher)."""
