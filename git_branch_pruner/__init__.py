"""
git-branch-pruner - delete local branches whose pull requests have landed
"""

from .__version__ import __version__
from .core import BranchPruner

__all__ = ["BranchPruner", "__version__"]
