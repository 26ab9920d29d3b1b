"""Core functionality for git-branch-pruner"""

from typing import Dict, List, Optional, Sequence, Tuple, Union

from git_branch_pruner.config import TARGET_STATES, Config
from git_branch_pruner.exceptions import ConnectorError
from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.branch import Branch
from git_branch_pruner.models.pull_request import PullRequestState
from git_branch_pruner.models.remote import Remote
from git_branch_pruner.services.classifier import DeletabilityClassifier
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.services.deletion_service import DeletionService
from git_branch_pruner.services.fetcher import FetchOrchestrator
from git_branch_pruner.services.remote_resolver import RemoteResolver
from git_branch_pruner.utils.threading import CancellationToken

logger = get_logger(__name__)


class BranchPruner:
    """Decides which local branches can go and deletes them.

    Every call runs against the given connector; nothing is cached between
    calls, so running get_branches twice on an unchanged repository gives
    the same answer.
    """

    def __init__(
        self,
        connector: Connector,
        config: Union[Config, dict, None] = None,
        cancellation: Optional[CancellationToken] = None,
    ):
        """Initialize BranchPruner.

        Args:
            connector: Source of git and code host data
            config: Configuration dict or Config object
            cancellation: Token the caller can cancel to abort in-flight work
        """
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config
        self.connector = connector
        self.cancellation = cancellation or CancellationToken()

        self.remote_resolver = RemoteResolver(connector, config, self.cancellation)
        self.fetcher = FetchOrchestrator(connector, config, self.cancellation)
        self.classifier = DeletabilityClassifier(connector, self.cancellation)
        self.deletion_service = DeletionService(connector, self.cancellation)

    def get_remote(self) -> Remote:
        """Resolve the primary remote.

        Raises:
            NotFoundError: If the repository has no remotes
        """
        return self.remote_resolver.resolve()

    def _resolve_target_state(self, target_state: Union[str, PullRequestState, None]) -> PullRequestState:
        if target_state is None:
            return self.config.pull_request_state
        if isinstance(target_state, PullRequestState):
            if target_state not in TARGET_STATES.values():
                raise ValueError(f"target_state must be one of {sorted(TARGET_STATES)}, got '{target_state.value}'")
            return target_state
        if target_state not in TARGET_STATES:
            raise ValueError(f"target_state must be one of {sorted(TARGET_STATES)}, got '{target_state}'")
        return TARGET_STATES[target_state]

    def get_branches(
        self,
        remote: Remote,
        target_state: Union[str, PullRequestState, None] = None,
        dry_run: Optional[bool] = None,
    ) -> List[Branch]:
        """Classify every local branch.

        Args:
            remote: Primary remote from get_remote()
            target_state: "merged" or "closed" (closed includes merged); defaults to config
            dry_run: Skip the checkout of the default branch; defaults to config

        Returns:
            Branches sorted by name, each NotDeletable or Deletable

        Raises:
            ConnectorError: If any mandatory fetch fails; no partial result is returned
            PullRequestDecodeError: If the code host response cannot be decoded
            OperationCancelledError: If the run was cancelled
        """
        state = self._resolve_target_state(target_state)
        if dry_run is None:
            dry_run = self.config.dry_run

        repo_names, default_branch_name = self.fetcher.fetch_repository(remote)
        branches = self.fetcher.load_branches(remote, default_branch_name, repo_names)
        branches = self.classifier.classify(branches, state)
        branches = self.classifier.switch_to_default_branch_if_deleted(
            branches, default_branch_name, dry_run
        )
        return sorted(branches, key=lambda b: b.name)

    def delete_branches(self, branches: Sequence[Branch]) -> List[Branch]:
        """Delete Deletable branches; those confirmed gone become Deleted."""
        return self.deletion_service.delete_branches(branches)

    def delete_worktrees(self, branches: Sequence[Branch]) -> Tuple[Dict[str, bool], List[ConnectorError]]:
        """Remove linked worktrees of Deletable branches.

        Returns:
            Tuple of (removed, errors)
        """
        return self.deletion_service.delete_worktrees(branches)

    def lock_branches(self, branch_names: Sequence[str]) -> List[str]:
        return self.deletion_service.lock_branches(branch_names)

    def unlock_branches(self, branch_names: Sequence[str]) -> List[str]:
        return self.deletion_service.unlock_branches(branch_names)

    def prune_remote_branches(self, remote: Remote) -> bool:
        return self.deletion_service.prune_remote_branches(remote.name)
