"""Worktree data models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Worktree:
    """Information about a git worktree."""

    path: str
    branch_name: str  # empty for a detached worktree
    is_main: bool  # First entry of `git worktree list` is the main working tree
    is_locked: bool

    def __str__(self) -> str:
        """String representation of worktree."""
        main_marker = " (main)" if self.is_main else ""
        lock_marker = " [locked]" if self.is_locked else ""
        return f"{self.branch_name or '(detached)'} @ {self.path}{main_marker}{lock_marker}"
