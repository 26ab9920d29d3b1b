"""Data models for git-branch-pruner."""

from .branch import Branch, BranchState
from .pull_request import PullRequest, PullRequestState
from .remote import Remote
from .worktree import Worktree

__all__ = [
    "Branch",
    "BranchState",
    "PullRequest",
    "PullRequestState",
    "Remote",
    "Worktree",
]
