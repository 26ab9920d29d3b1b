"""Core functionality for git-branch-pruner."""

from .branch_pruner import BranchPruner

__all__ = ["BranchPruner"]
