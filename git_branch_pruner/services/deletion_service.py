"""Branch deletion, worktree removal and lock flags."""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from git_branch_pruner.constants import LEGACY_LOCK_CONFIG_KEY, LOCK_CONFIG_KEY
from git_branch_pruner.exceptions import ConnectorError
from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.branch import Branch, BranchState
from git_branch_pruner.services.branch_lister import BranchLister, branch_name_exists
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.utils.threading import CancellationToken

logger = get_logger(__name__)


def get_branch_names(branches: Sequence[Branch], state: BranchState) -> List[str]:
    return [branch.name for branch in branches if branch.state == state]


def check_deleted(before: Sequence[Branch], after: Sequence[Branch]) -> List[Branch]:
    """Mark Deletable branches that no longer exist as Deleted."""
    remaining = list(after)
    return [
        replace(branch, state=BranchState.DELETED)
        if branch.state == BranchState.DELETABLE and not branch_name_exists(branch.name, remaining)
        else branch
        for branch in before
    ]


class DeletionService:
    """Applies decisions to the repository."""

    def __init__(self, connector: Connector, cancellation: Optional[CancellationToken] = None):
        self.connector = connector
        self.cancellation = cancellation or CancellationToken()
        self.lister = BranchLister(connector, self.cancellation)

    def delete_branches(self, branches: Sequence[Branch]) -> List[Branch]:
        """Delete every Deletable branch in one call, then verify by listing again.

        Branches that survive stay Deletable so the caller can report them.

        Raises:
            ConnectorError: If branches cannot be listed after deleting
        """
        names = get_branch_names(branches, BranchState.DELETABLE)
        if not names:
            return list(branches)

        self.cancellation.raise_if_cancelled()
        try:
            self.connector.delete_branches(names)
            logger.info(f"Deleted branches: {', '.join(names)}")
        except ConnectorError as e:
            # Some branches may still have been deleted; the listing below decides
            logger.warning(f"Branch deletion reported an error: {e}")

        results = check_deleted(branches, self.lister.list_branches())
        failed = get_branch_names(results, BranchState.DELETABLE)
        if failed:
            logger.warning(f"Branches still present after deletion: {', '.join(failed)}")
        return results

    def delete_worktrees(self, branches: Sequence[Branch]) -> Tuple[Dict[str, bool], List[ConnectorError]]:
        """Remove linked worktrees of Deletable branches. The main worktree is never removed.

        Returns:
            Tuple of (removed, errors): removed maps branch name to True for
            each worktree removed; errors holds one entry per failed removal.
        """
        removed: Dict[str, bool] = {}
        errors: List[ConnectorError] = []

        for branch in branches:
            if branch.state != BranchState.DELETABLE:
                continue
            if branch.worktree is None or branch.worktree.is_main:
                continue

            self.cancellation.raise_if_cancelled()
            try:
                self.connector.remove_worktree(branch.worktree.path)
            except ConnectorError as e:
                errors.append(e)
            else:
                removed[branch.name] = True

        return removed, errors

    def _remove_lock_flags(self, branch_name: str) -> None:
        for key in (LOCK_CONFIG_KEY, LEGACY_LOCK_CONFIG_KEY):
            try:
                self.connector.remove_config(key.format(name=branch_name))
            except ConnectorError:
                # Not set
                pass

    def lock_branches(self, branch_names: Sequence[str]) -> List[str]:
        """Lock existing branches against deletion; unknown names are ignored.

        Returns:
            Names that were locked

        Raises:
            ConnectorError: If branches cannot be listed or a flag cannot be written
        """
        branches = self.lister.list_branches()
        locked = []
        for name in branch_names:
            if not branch_name_exists(name, branches):
                logger.debug(f"Not locking unknown branch {name}")
                continue
            self.cancellation.raise_if_cancelled()
            self._remove_lock_flags(name)
            self.connector.add_config(LOCK_CONFIG_KEY.format(name=name), "true")
            locked.append(name)
        return locked

    def unlock_branches(self, branch_names: Sequence[str]) -> List[str]:
        """Remove lock flags (current and legacy) from existing branches.

        Returns:
            Names that were unlocked
        """
        branches = self.lister.list_branches()
        unlocked = []
        for name in branch_names:
            if not branch_name_exists(name, branches):
                logger.debug(f"Not unlocking unknown branch {name}")
                continue
            self.cancellation.raise_if_cancelled()
            self._remove_lock_flags(name)
            unlocked.append(name)
        return unlocked

    def prune_remote_branches(self, remote_name: str) -> bool:
        """Best-effort `git remote prune`; returns whether it succeeded."""
        self.cancellation.raise_if_cancelled()
        try:
            self.connector.prune_remote_branches(remote_name)
        except ConnectorError as e:
            logger.warning(f"Could not prune remote-tracking branches of {remote_name}: {e}")
            return False
        return True
