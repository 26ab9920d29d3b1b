"""Pull request search queries, response decoding and branch matching."""

import json
import re
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from git_branch_pruner.constants import MERGE_CONFIG_KEY
from git_branch_pruner.exceptions import (
    ConnectorError,
    PullRequestDecodeError,
    RepositoryDecodeError,
    UnexpectedPullRequestStateError,
)
from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.branch import Branch
from git_branch_pruner.models.pull_request import PullRequest, PullRequestState
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.utils.text import split_lines
from git_branch_pruner.utils.threading import CancellationToken

logger = get_logger(__name__)

PULL_REF = re.compile(r"^refs/pull/(\d+)")

PULL_REQUEST_STATES = {
    "CLOSED": PullRequestState.CLOSED,
    "MERGED": PullRequestState.MERGED,
    "OPEN": PullRequestState.OPEN,
}

# Search API limit on query length
DEFAULT_QUERY_LENGTH_LIMIT = 256


def get_query_orgs(repo_names: Sequence[str]) -> str:
    return " ".join(f"org:{name.split('/')[0]}" for name in repo_names)


def get_query_repos(repo_names: Sequence[str]) -> str:
    return " ".join(f"repo:{name}" for name in repo_names)


def get_lookup_hash(branch: Branch) -> str:
    """Remote head if known, otherwise the oldest own commit; "" if neither."""
    if branch.remote_head_oid:
        return branch.remote_head_oid
    if branch.commits:
        return branch.commits[-1]
    return ""


def get_query_hashes(branches: Sequence[Branch], limit: int = DEFAULT_QUERY_LENGTH_LIMIT) -> List[str]:
    """Pack `hash:<oid>` terms into space-separated shards of at most `limit` characters."""
    shards: List[str] = []
    current = ""
    for branch in branches:
        oid = get_lookup_hash(branch)
        if not oid:
            continue
        term = f"hash:{oid}"
        candidate = f"{current} {term}" if current else term
        if current and len(candidate) > limit:
            shards.append(current)
            candidate = term
        current = candidate
    if current:
        shards.append(current)
    return shards


def parse_repository(payload: str) -> Tuple[List[str], str]:
    """Decode repository metadata.

    Returns:
        (repo names as owner/name, repository first and fork parent second
        when there is one; default branch name)

    Raises:
        RepositoryDecodeError: If the payload is not the expected JSON
    """
    try:
        data = json.loads(payload)
        repo_names = [f"{data['owner']['login']}/{data['name']}"]
        parent = data.get("parent") or {}
        if parent.get("name"):
            repo_names.append(f"{parent['owner']['login']}/{parent['name']}")
        return repo_names, data.get("default_branch") or ""
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise RepositoryDecodeError(str(e), payload) from e


def to_pull_request_state(state: str, payload: str = "") -> PullRequestState:
    try:
        return PULL_REQUEST_STATES[state]
    except KeyError:
        raise UnexpectedPullRequestStateError(state, payload) from None


def to_pull_requests(payload: str) -> List[PullRequest]:
    """Decode a pull request search response.

    Raises:
        PullRequestDecodeError: If the payload is malformed or reports errors
        UnexpectedPullRequestStateError: For a state other than OPEN, MERGED, CLOSED
    """
    try:
        data = json.loads(payload)
    except ValueError as e:
        raise PullRequestDecodeError(str(e), payload) from e

    if not isinstance(data, dict):
        raise PullRequestDecodeError("response is not an object", payload)
    if data.get("errors"):
        messages = "; ".join(str(err.get("message", err)) if isinstance(err, dict) else str(err)
                             for err in data["errors"])
        raise PullRequestDecodeError(messages, payload)

    results = []
    try:
        edges = data["data"]["search"]["edges"] or []
        for edge in edges:
            node = edge["node"]
            commits = tuple(
                commit_node["commit"]["oid"] for commit_node in (node["commits"]["nodes"] or [])
            )
            author = node.get("author") or {}
            results.append(PullRequest(
                name=node["headRefName"],
                state=to_pull_request_state(node["state"], payload),
                is_draft=bool(node.get("isDraft")),
                number=int(node["number"]),
                commits=commits,
                url=node.get("url", ""),
                author=author.get("login", ""),
            ))
    except (KeyError, TypeError, AttributeError, ValueError) as e:
        raise PullRequestDecodeError(f"unexpected response shape: {e}", payload) from e

    return results


def get_pr_number(merge_config: str) -> int:
    """PR number from a `refs/pull/<N>/head` merge ref; 0 if there is none."""
    match = PULL_REF.match(merge_config.strip())
    return int(match.group(1)) if match else 0


def find_matched_pull_requests(
    branch_name: str, pull_requests: Sequence[PullRequest], pr_numbers: Dict[str, int]
) -> List[PullRequest]:
    """PRs belonging to `branch_name`.

    A PR number some branch is explicitly linked to only goes to that
    branch; every other PR goes to the branch named after its head ref.
    """
    linked_numbers = set(pr_numbers.values())
    results: List[PullRequest] = []
    seen = set()

    for pr in pull_requests:
        if pr.number in seen:
            continue
        if pr.number in linked_numbers:
            if pr.number == pr_numbers.get(branch_name):
                results.append(pr)
                seen.add(pr.number)
        elif pr.name == branch_name:
            results.append(pr)
            seen.add(pr.number)

    return sorted(results, key=lambda pr: pr.number)


class PullRequestMatcher:
    """Assigns fetched pull requests to local branches."""

    def __init__(self, connector: Connector, cancellation: Optional[CancellationToken] = None):
        self.connector = connector
        self.cancellation = cancellation or CancellationToken()

    def get_linked_pr_numbers(self, branches: Sequence[Branch]) -> Dict[str, int]:
        """Explicit PR links recorded by PR-checkout workflows in branch.<name>.merge."""
        pr_numbers = {}
        for branch in branches:
            if branch.is_detached:
                continue
            self.cancellation.raise_if_cancelled()
            try:
                merge_config = split_lines(
                    self.connector.get_config(MERGE_CONFIG_KEY.format(name=branch.name))
                )
            except ConnectorError:
                continue
            number = get_pr_number(merge_config[0]) if merge_config else 0
            if number > 0:
                pr_numbers[branch.name] = number
        return pr_numbers

    def match(self, branches: Sequence[Branch], pull_requests: Sequence[PullRequest]) -> List[Branch]:
        pr_numbers = self.get_linked_pr_numbers(branches)
        if pr_numbers:
            logger.debug(f"Explicitly linked pull requests: {pr_numbers}")

        return [
            replace(branch, pull_requests=tuple(
                find_matched_pull_requests(branch.name, pull_requests, pr_numbers)
            ))
            for branch in branches
        ]
