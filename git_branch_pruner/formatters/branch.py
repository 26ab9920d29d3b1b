"""Branch line formatting utilities."""

from rich.markup import escape

from git_branch_pruner.constants import (
    REASON_LOCKED,
    REASON_UNCOMMITTED_CHANGES,
    REASON_WORKTREE_HERE,
    REASON_WORKTREE_LOCKED,
    SYMBOL_CURRENT_BRANCH,
)
from git_branch_pruner.models.branch import Branch


def format_branch_name(branch: Branch) -> str:
    """
    Format branch name with the current branch marker.

    Args:
        branch: Branch to format

    Returns:
        Rich markup, e.g. "* [green]main[/green]" or "  feature"
    """
    if branch.head:
        return f"{SYMBOL_CURRENT_BRANCH} [green]{escape(branch.name)}[/green]"
    return f"  {escape(branch.name)}"


def format_worktree(branch: Branch) -> str:
    """Path of a linked worktree the branch is checked out in, or ""."""
    if branch.worktree is None or branch.worktree.is_main:
        return ""
    return f"[bright_black](worktree: {escape(branch.worktree.path)})[/bright_black]"


def get_kept_reason(branch: Branch) -> str:
    """
    Short reason a branch was kept that isn't visible from its pull requests.

    Returns:
        One of the REASON_* constants, or "" when the pull requests explain it
    """
    if branch.is_locked:
        return REASON_LOCKED
    if branch.worktree is not None and branch.worktree.is_locked:
        return REASON_WORKTREE_LOCKED
    if branch.worktree is not None and not branch.worktree.is_main and branch.head:
        return REASON_WORKTREE_HERE
    if not branch.is_default and branch.pull_requests and branch.has_tracked_changes:
        return REASON_UNCOMMITTED_CHANGES
    return ""


def format_branch_line(branch: Branch) -> str:
    parts = [format_branch_name(branch)]
    worktree = format_worktree(branch)
    if worktree:
        parts.append(worktree)
    reason = get_kept_reason(branch)
    if reason:
        parts.append(f"[bright_black]\\[{reason}][/bright_black]")
    return " ".join(parts)
