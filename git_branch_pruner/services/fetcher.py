"""Fetch orchestration: gathers everything classification needs, in parallel where possible."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import partial
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar, Union, TYPE_CHECKING

from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.branch import Branch
from git_branch_pruner.models.pull_request import PullRequest
from git_branch_pruner.models.remote import Remote
from git_branch_pruner.services.ancestry import AncestryTrimmer
from git_branch_pruner.services.branch_lister import BranchLister
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.services.pull_requests import (
    DEFAULT_QUERY_LENGTH_LIMIT,
    PullRequestMatcher,
    get_query_hashes,
    get_query_orgs,
    get_query_repos,
    parse_repository,
    to_pull_requests,
)
from git_branch_pruner.utils.threading import CancellationToken, get_optimal_worker_count

if TYPE_CHECKING:
    from git_branch_pruner.config import Config

logger = get_logger(__name__)

T = TypeVar("T")


def gather(tasks: Sequence[Callable[[], T]], max_workers: int, name: str = "worker") -> List[T]:
    """Run tasks on a fresh thread pool and return their results in completion order.

    A failing task does not stop the others: every task runs to completion
    and the first failure seen while draining is re-raised once the pool has
    shut down. An interrupt (KeyboardInterrupt) cancels the tasks that have
    not started yet.
    """
    if not tasks:
        return []

    results: List[T] = []
    error: Optional[Exception] = None

    with ThreadPoolExecutor(
        max_workers=max(1, min(max_workers, len(tasks))), thread_name_prefix=name
    ) as executor:
        futures = [executor.submit(task) for task in tasks]
        try:
            for future in as_completed(futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    if error is None:
                        error = e
                    else:
                        logger.debug(f"Further {name} task failure: {e}")
        except BaseException:
            for pending in futures:
                pending.cancel()
            raise

    if error is not None:
        raise error
    return results


class FetchOrchestrator:
    """Loads branches, their own commits and their pull requests."""

    def __init__(
        self,
        connector: Connector,
        config: Union["Config", dict, None] = None,
        cancellation: Optional[CancellationToken] = None,
    ):
        config = config or {}
        self.connector = connector
        self.cancellation = cancellation or CancellationToken()
        self.max_workers = get_optimal_worker_count(config.get("workers"))
        self.query_length_limit = config.get("query_length_limit") or DEFAULT_QUERY_LENGTH_LIMIT
        self.lister = BranchLister(connector, self.cancellation)
        self.trimmer = AncestryTrimmer(connector, self.cancellation)
        self.matcher = PullRequestMatcher(connector, self.cancellation)

    def fetch_repository(self, remote: Remote) -> Tuple[List[str], str]:
        """Repository (and fork parent) names plus the default branch; checks access to each.

        Raises:
            ConnectorError: If the code host cannot be queried or a repository is inaccessible
            RepositoryDecodeError: If the repository metadata is malformed
        """
        self.cancellation.raise_if_cancelled()
        repo_names, default_branch_name = parse_repository(
            self.connector.get_repo_names(remote.hostname, remote.repo_name)
        )
        logger.debug(f"Repositories {repo_names}, default branch {default_branch_name}")

        self.cancellation.raise_if_cancelled()
        self.connector.check_repos(remote.hostname, repo_names)
        return repo_names, default_branch_name

    def fetch_commits(
        self, remote: Remote, branches: Sequence[Branch], default_branch_name: str
    ) -> List[Branch]:
        """One task per branch: remote head lookup, log, trimming."""
        tasks = [
            partial(self.trimmer.load_commits, remote, branch, default_branch_name)
            for branch in branches
        ]
        logger.debug(f"Fetching commits for {len(tasks)} branches using {self.max_workers} workers")
        results = gather(tasks, self.max_workers, name="commits")
        return sorted(results, key=lambda b: b.name)

    def _search_shard(self, hostname: str, orgs: str, repos: str, query_hashes: str) -> List[PullRequest]:
        self.cancellation.raise_if_cancelled()
        return to_pull_requests(
            self.connector.get_pull_requests(hostname, orgs, repos, query_hashes)
        )

    def fetch_pull_requests(
        self, remote: Remote, repo_names: Sequence[str], branches: Sequence[Branch]
    ) -> List[PullRequest]:
        """One search per query shard; results are concatenated."""
        orgs = get_query_orgs(repo_names)
        repos = get_query_repos(repo_names)
        shards = get_query_hashes(branches, self.query_length_limit)

        tasks = [partial(self._search_shard, remote.hostname, orgs, repos, shard) for shard in shards]
        logger.debug(f"Searching pull requests in {len(tasks)} shard(s)")

        pull_requests: List[PullRequest] = []
        for shard_results in gather(tasks, self.max_workers, name="search"):
            pull_requests.extend(shard_results)
        return pull_requests

    def load_branches(
        self, remote: Remote, default_branch_name: str, repo_names: Sequence[str]
    ) -> List[Branch]:
        """Every local branch with commits, worktree and pull requests filled in.

        Raises:
            ConnectorError: If a mandatory stage fails
            PullRequestDecodeError: If a search response is malformed
        """
        branches = self.lister.load(remote, default_branch_name)
        branches = self.fetch_commits(remote, branches, default_branch_name)
        branches = self.lister.apply_tracked_changes(branches)
        branches = self.lister.apply_worktrees(branches)

        pull_requests = self.fetch_pull_requests(remote, repo_names, branches)
        logger.debug(f"Found {len(pull_requests)} pull request(s)")
        return self.matcher.match(branches, pull_requests)
