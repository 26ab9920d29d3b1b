"""Pull request and result-section formatting utilities."""

from typing import List, Sequence, Tuple

from rich.markup import escape

from git_branch_pruner.constants import (
    DRAFT_PR_COLOR,
    PR_STATE_COLORS,
    SYMBOL_TREE_BRANCH,
    SYMBOL_TREE_LAST,
)
from git_branch_pruner.models.branch import Branch, BranchState
from git_branch_pruner.models.pull_request import PullRequest, PullRequestState


def get_pr_color(state: PullRequestState, is_draft: bool) -> str:
    """Rich color for a pull request number; drafts are dimmed."""
    if state == PullRequestState.OPEN and is_draft:
        return DRAFT_PR_COLOR
    return PR_STATE_COLORS.get(state, DRAFT_PR_COLOR)


def format_pull_request(pr: PullRequest, is_last: bool) -> str:
    """
    Format one pull request as a tree line under its branch.

    Example:
        "    └─ [magenta]#12[/magenta]  https://github.com/o/r/pull/12 [bright_black]octocat[/bright_black]"
    """
    line = SYMBOL_TREE_LAST if is_last else SYMBOL_TREE_BRANCH
    color = get_pr_color(pr.state, pr.is_draft)
    return (
        f"    {line} [{color}]#{pr.number}[/{color}]  {escape(pr.url)} "
        f"[bright_black]{escape(pr.author)}[/bright_black]"
    )


def get_result_states(dry_run: bool) -> Tuple[Tuple[BranchState, ...], Tuple[BranchState, ...]]:
    """
    States listed under "Deleted branches" and "Branches not deleted".

    In dry-run nothing is deleted, so Deletable is shown as deleted.
    """
    if dry_run:
        return (BranchState.DELETABLE,), (BranchState.NOT_DELETABLE,)
    return (BranchState.DELETED,), (BranchState.DELETABLE, BranchState.NOT_DELETABLE)


def select_branches(branches: Sequence[Branch], states: Sequence[BranchState]) -> List[Branch]:
    return [branch for branch in branches if branch.state in states]
