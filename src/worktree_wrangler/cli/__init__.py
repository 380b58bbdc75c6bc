"""
Worktree Wrangler CLI package.

Commands are auto-discovered from cli/commands/.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Context wiring, exit codes and shared rendering helpers
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_project_arg,
    add_worktree_arg,
    add_force_flag,
    add_dry_run_flag,
    add_verbose_flag,
)
from ._utils import (
    EXIT_OK,
    EXIT_FAILURE,
    EXIT_INVALID_INPUT,
    EXIT_NOT_FOUND,
    exit_code_for,
    report_error,
    get_config_manager,
    get_config,
    get_context,
    finish,
    format_age,
)

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_project_arg",
    "add_worktree_arg",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    # Utilities
    "EXIT_OK",
    "EXIT_FAILURE",
    "EXIT_INVALID_INPUT",
    "EXIT_NOT_FOUND",
    "exit_code_for",
    "report_error",
    "get_config_manager",
    "get_config",
    "get_context",
    "finish",
    "format_age",
]
