"""Git-related services for git-branch-pruner."""

from .operations import GitOperations
from .worktrees import WorktreeService, parse_worktrees
from .github import GitHubService
from .connection import Connection

__all__ = [
    "GitOperations",
    "WorktreeService",
    "parse_worktrees",
    "GitHubService",
    "Connection",
]
