"""Branch model and related enums"""
import re
from enum import Enum
from dataclasses import dataclass
from typing import Optional, Tuple

from git_branch_pruner.models.pull_request import PullRequest
from git_branch_pruner.models.worktree import Worktree

DETACHED_BRANCH_NAME = re.compile(r"^\(.+\)")


class BranchState(Enum):
    """Deletability of a branch.

    UNKNOWN only exists while branches are being loaded; every branch
    returned from a run is NOT_DELETABLE, DELETABLE or DELETED.
    """
    UNKNOWN = "unknown"
    NOT_DELETABLE = "not-deletable"
    DELETABLE = "deletable"
    DELETED = "deleted"


@dataclass(frozen=True)
class Branch:
    """A local branch and everything needed to decide whether it can go."""
    name: str
    head: bool = False
    is_default: bool = False
    is_merged: bool = False
    is_locked: bool = False
    has_tracked_changes: bool = False
    remote_head_oid: str = ""
    commits: Tuple[str, ...] = ()  # own commits, newest first
    pull_requests: Tuple[PullRequest, ...] = ()
    state: BranchState = BranchState.UNKNOWN
    worktree: Optional[Worktree] = None

    @property
    def is_detached(self) -> bool:
        """True for the pseudo-branch git lists for a detached HEAD."""
        return bool(DETACHED_BRANCH_NAME.match(self.name))
