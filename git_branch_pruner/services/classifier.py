"""Deletability classification"""

from dataclasses import replace
from typing import List, Optional, Sequence

from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.branch import Branch, BranchState
from git_branch_pruner.models.pull_request import PullRequest, PullRequestState
from git_branch_pruner.services.branch_lister import branch_name_exists
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.utils.threading import CancellationToken

logger = get_logger(__name__)


def is_fully_merged(branch: Branch, pr: PullRequest, target_state: PullRequestState) -> bool:
    """True if `pr` satisfies the target state and contains the branch's own head commit.

    Under the "closed" target a merged PR counts too, since merged PRs
    are closed PRs as far as the code host's UI is concerned.
    """
    if not branch.commits:
        return False
    if target_state == PullRequestState.MERGED and pr.state != PullRequestState.MERGED:
        return False
    if target_state == PullRequestState.CLOSED and pr.state not in (
        PullRequestState.CLOSED, PullRequestState.MERGED
    ):
        return False
    return branch.commits[0] in pr.commits


def get_delete_status(branch: Branch, target_state: PullRequestState) -> BranchState:
    """Decide one branch; the first matching rule wins."""
    if branch.is_locked:
        return BranchState.NOT_DELETABLE

    if branch.worktree is not None and branch.worktree.is_locked:
        return BranchState.NOT_DELETABLE

    # Running from inside the branch's own linked worktree
    if branch.head and branch.worktree is not None and not branch.worktree.is_main:
        return BranchState.NOT_DELETABLE

    if branch.head and branch.has_tracked_changes:
        return BranchState.NOT_DELETABLE

    if not branch.pull_requests:
        return BranchState.NOT_DELETABLE

    if any(pr.state == PullRequestState.OPEN for pr in branch.pull_requests):
        return BranchState.NOT_DELETABLE

    if not any(is_fully_merged(branch, pr, target_state) for pr in branch.pull_requests):
        return BranchState.NOT_DELETABLE

    return BranchState.DELETABLE


def classify(branches: Sequence[Branch], target_state: PullRequestState) -> List[Branch]:
    return [replace(b, state=get_delete_status(b, target_state)) for b in branches]


class DeletabilityClassifier:
    """Classifies branches and moves HEAD off a branch that is about to go."""

    def __init__(self, connector: Connector, cancellation: Optional[CancellationToken] = None):
        self.connector = connector
        self.cancellation = cancellation or CancellationToken()

    def classify(self, branches: Sequence[Branch], target_state: PullRequestState) -> List[Branch]:
        results = classify(branches, target_state)
        for branch in results:
            logger.debug(f"{branch.name}: {branch.state.value}")
        return results

    def switch_to_default_branch_if_deleted(
        self, branches: Sequence[Branch], default_branch_name: str, dry_run: bool
    ) -> List[Branch]:
        """Check out the default branch when the checked-out branch is Deletable.

        The default branch becomes the head. If it has no local branch yet,
        a NotDeletable record is added for it (git creates it on checkout).

        Raises:
            ConnectorError: If the checkout fails
        """
        if not any(b.head and b.state == BranchState.DELETABLE for b in branches):
            return list(branches)

        if not dry_run:
            self.cancellation.raise_if_cancelled()
            logger.info(f"Switching to {default_branch_name}")
            self.connector.checkout_branch(default_branch_name)

        results = []
        if not branch_name_exists(default_branch_name, list(branches)):
            results.append(Branch(
                name=default_branch_name,
                head=True,
                is_default=True,
                state=BranchState.NOT_DELETABLE,
            ))

        results.extend(replace(b, head=b.name == default_branch_name) for b in branches)
        return results
