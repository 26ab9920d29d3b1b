"""GitHub API integration service"""

import json
import os
import time
from threading import Lock
from typing import Dict, Optional, Sequence, TYPE_CHECKING, Union

from github import Auth, Github, GithubException

from git_branch_pruner.exceptions import AuthenticationError, ConnectorError
from git_branch_pruner.logging_config import get_logger

if TYPE_CHECKING:
    from git_branch_pruner.config import Config

logger = get_logger(__name__)

PUBLIC_HOSTNAME = "github.com"

PULL_REQUEST_QUERY = """query {
  search(type: ISSUE, query: "is:pr %(orgs)s %(repos)s %(hashes)s", last: %(search_limit)d) {
    issueCount
    edges {
      node {
        ... on PullRequest {
          number
          url
          state
          isDraft
          headRefName
          commits(last: %(commit_limit)d) {
            nodes {
              commit {
                oid
              }
            }
          }
          author { login }
        }
      }
    }
  }
}"""


def get_api_base_url(hostname: str) -> str:
    """REST endpoint for github.com or a GitHub Enterprise Server host."""
    if hostname == PUBLIC_HOSTNAME:
        return "https://api.github.com"
    return f"https://{hostname}/api/v3"


def get_graphql_url(hostname: str) -> str:
    if hostname == PUBLIC_HOSTNAME:
        return "https://api.github.com/graphql"
    return f"https://{hostname}/api/graphql"


class GitHubService:
    """Code host queries: repository metadata and pull request search."""

    def __init__(self, config: Union["Config", dict]):
        self.config = config
        self.github_token = (
            config.get("github_token")
            or os.environ.get("GH_TOKEN")
            or os.environ.get("GITHUB_TOKEN")
        )
        self.search_limit = config.get("pr_search_limit", 100)
        self.commit_limit = config.get("pr_commit_limit", 100)
        self._clients: Dict[str, Github] = {}
        self._clients_lock = Lock()  # PR shards are queried from worker threads

    def _get_client(self, hostname: str) -> Github:
        """Return the API client for a hostname, creating it on first use."""
        with self._clients_lock:
            client = self._clients.get(hostname)
            if client is None:
                auth = Auth.Token(self.github_token) if self.github_token else None
                if not self.github_token:
                    logger.debug(f"[GitHub] No token found for {hostname}, using anonymous access")
                client = Github(auth=auth, base_url=get_api_base_url(hostname))
                self._clients[hostname] = client
                logger.debug(f"[GitHub] Created API client for {hostname}")
            return client

    @staticmethod
    def _wrap(e: GithubException, *args: str) -> ConnectorError:
        message = e.data.get("message") if isinstance(e.data, dict) else None
        return ConnectorError("github", args, f"HTTP {e.status}: {message or e}")

    def check_repos(self, hostname: str, repo_names: Sequence[str]) -> None:
        """Verify that each repository is visible with the current credentials."""
        client = self._get_client(hostname)
        for name in repo_names:
            try:
                client.get_repo(name)
            except GithubException as e:
                raise self._wrap(e, "repos", name) from e
            logger.debug(f"[GitHub] Repository {name} is accessible on {hostname}")

    def get_repo_names(self, hostname: str, repo_name: str) -> str:
        """Repository metadata as JSON (owner, name, default_branch, parent)."""
        start = time.monotonic()
        try:
            repo = self._get_client(hostname).get_repo(repo_name)
            raw = repo.raw_data
        except GithubException as e:
            raise self._wrap(e, "repos", repo_name) from e

        logger.debug(f"[GitHub] [{time.monotonic() - start:.3f}s] repos/{repo_name}")
        return json.dumps(raw)

    def get_pull_requests(self, hostname: str, orgs: str, repos: str, query_hashes: str) -> str:
        """Search pull requests containing any of the given commit hashes.

        Returns the GraphQL response body as JSON text. GraphQL-level
        errors come back inside the body and are left to the decoder.

        Raises:
            AuthenticationError: If no token is configured; search has no anonymous access
            ConnectorError: If the request fails
        """
        if not self.github_token:
            raise AuthenticationError(hostname)

        query = PULL_REQUEST_QUERY % {
            "orgs": orgs,
            "repos": repos,
            "hashes": query_hashes,
            "search_limit": self.search_limit,
            "commit_limit": self.commit_limit,
        }
        url = get_graphql_url(hostname)

        start = time.monotonic()
        try:
            _, data = self._get_client(hostname).requester.requestJsonAndCheck(
                "POST", url, input={"query": query}
            )
        except GithubException as e:
            raise self._wrap(e, "graphql", query_hashes) from e

        body = json.dumps(data)
        logger.debug(f"[GitHub] [{time.monotonic() - start:.3f}s] graphql {query_hashes} -> {body!r}")
        return body

    def close(self) -> None:
        """Close the GitHub API connections to clean up resources."""
        with self._clients_lock:
            clients, self._clients = list(self._clients.values()), {}
        for client in clients:
            client.close()
        if clients:
            logger.debug("[GitHub] Closed GitHub API connections")
