"""Branch listing: turns raw git listings into Branch records."""

import re
from dataclasses import replace
from typing import Dict, List, NamedTuple, Optional

from git_branch_pruner.constants import LEGACY_LOCK_CONFIG_KEY, LOCK_CONFIG_KEY
from git_branch_pruner.exceptions import ConnectorError
from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.branch import Branch
from git_branch_pruner.models.remote import Remote
from git_branch_pruner.models.worktree import Worktree
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.services.git.worktrees import parse_worktrees
from git_branch_pruner.utils.text import split_lines
from git_branch_pruner.utils.threading import CancellationToken

logger = get_logger(__name__)

# `*` marks the current branch, `+` a branch checked out in another worktree
MERGED_BRANCH_LINE = re.compile(r"^[ *+]+(.+)")


class UncommittedChange(NamedTuple):
    """One `git status --short` entry."""
    index: str
    worktree: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.worktree == "?"


def parse_branches(output: str) -> List[Branch]:
    """Parse `%(HEAD):%(refname:lstrip=2):%(objectname)` lines."""
    branches = []
    for line in split_lines(output):
        fields = line.split(":")
        if len(fields) < 2:
            continue
        branches.append(Branch(name=fields[1], head=fields[0] == "*"))
    return branches


def parse_merged_branch_names(output: str) -> List[str]:
    names = []
    for line in split_lines(output):
        match = MERGED_BRANCH_LINE.match(line)
        if match:
            names.append(match.group(1))
    return names


def parse_uncommitted_changes(output: str) -> List[UncommittedChange]:
    changes = []
    for line in split_lines(output):
        if len(line) < 3:
            continue
        changes.append(UncommittedChange(line[0], line[1], line[3:]))
    return changes


def branch_name_exists(name: str, branches: List[Branch]) -> bool:
    return any(branch.name == name for branch in branches)


def apply_default(branches: List[Branch], default_branch_name: str) -> List[Branch]:
    return [replace(b, is_default=b.name == default_branch_name) for b in branches]


def apply_merged(branches: List[Branch], merged_names: List[str]) -> List[Branch]:
    merged = set(merged_names)
    return [replace(b, is_merged=b.name in merged) for b in branches]


def apply_tracked_changes(branches: List[Branch], changes: List[UncommittedChange]) -> List[Branch]:
    """Only the checked-out branch can carry uncommitted changes; untracked files don't count."""
    has_tracked = any(not change.is_untracked for change in changes)
    return [replace(b, has_tracked_changes=b.head and has_tracked) for b in branches]


def apply_worktrees(branches: List[Branch], worktrees: List[Worktree]) -> List[Branch]:
    by_branch: Dict[str, Worktree] = {wt.branch_name: wt for wt in worktrees if wt.branch_name}
    return [replace(b, worktree=by_branch.get(b.name)) for b in branches]


class BranchLister:
    """Lists local branches and annotates them with local repository facts."""

    def __init__(self, connector: Connector, cancellation: Optional[CancellationToken] = None):
        self.connector = connector
        self.cancellation = cancellation or CancellationToken()

    def list_branches(self) -> List[Branch]:
        """Plain listing: names and the head marker only."""
        self.cancellation.raise_if_cancelled()
        return parse_branches(self.connector.get_branch_names())

    def load(self, remote: Remote, default_branch_name: str) -> List[Branch]:
        """List branches and mark default, merged and locked ones.

        Raises:
            ConnectorError: If listing branches or merged branches fails
        """
        branches = apply_default(self.list_branches(), default_branch_name)

        self.cancellation.raise_if_cancelled()
        merged = self.connector.get_merged_branch_names(remote.name, default_branch_name)
        branches = apply_merged(branches, parse_merged_branch_names(merged))

        return [replace(b, is_locked=self.is_locked(b.name)) for b in branches]

    def read_config(self, key: str) -> str:
        """First line of a git config value; a missing key reads as empty."""
        self.cancellation.raise_if_cancelled()
        try:
            lines = split_lines(self.connector.get_config(key))
        except ConnectorError:
            return ""
        return lines[0].strip() if lines else ""

    def is_locked(self, branch_name: str) -> bool:
        for key in (LOCK_CONFIG_KEY, LEGACY_LOCK_CONFIG_KEY):
            if self.read_config(key.format(name=branch_name)) == "true":
                return True
        return False

    def apply_tracked_changes(self, branches: List[Branch]) -> List[Branch]:
        """Mark the head branch if the working copy has tracked changes.

        Raises:
            ConnectorError: If `git status` fails
        """
        self.cancellation.raise_if_cancelled()
        changes = parse_uncommitted_changes(self.connector.get_uncommitted_changes())
        return apply_tracked_changes(branches, changes)

    def apply_worktrees(self, branches: List[Branch]) -> List[Branch]:
        """Attach worktree info; without it branches are returned untouched."""
        self.cancellation.raise_if_cancelled()
        try:
            worktrees = parse_worktrees(self.connector.get_worktrees())
        except ConnectorError as e:
            logger.debug(f"Worktree information unavailable: {e}")
            return branches
        return apply_worktrees(branches, worktrees)
