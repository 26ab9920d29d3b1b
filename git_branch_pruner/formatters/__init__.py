"""Formatting utilities for git-branch-pruner.

- branch: branch line formatting (current marker, worktree, kept reason)
- status: pull request lines and result sections
"""

# Branch formatters
from .branch import (
    format_branch_line,
    format_branch_name,
    format_worktree,
    get_kept_reason,
)

# Status formatters
from .status import (
    format_pull_request,
    get_pr_color,
    get_result_states,
    select_branches,
)

__all__ = [
    # Branch
    "format_branch_line",
    "format_branch_name",
    "format_worktree",
    "get_kept_reason",
    # Status
    "format_pull_request",
    "get_pr_color",
    "get_result_states",
    "select_branches",
]
