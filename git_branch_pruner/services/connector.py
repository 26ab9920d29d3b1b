"""Connector interface between the pruning engine and git / the code host.

Every method returns the raw text output of the underlying command or API
call (JSON text for the code host) and raises ConnectorError on failure.
Parsing the output into models is the engine's job.
"""

from abc import ABC, abstractmethod
from typing import List, Sequence


class Connector(ABC):
    """Operations the engine needs from version control and the code host."""

    @abstractmethod
    def is_local_repo(self) -> bool:
        """Return True when the working directory is inside a git work tree."""

    @abstractmethod
    def check_repos(self, hostname: str, repo_names: Sequence[str]) -> None:
        """Verify every repository in repo_names is reachable on the code host."""

    @abstractmethod
    def get_remote_names(self) -> str:
        """`git remote -v` output."""

    @abstractmethod
    def get_ssh_config(self, name: str) -> str:
        """Effective SSH client configuration for host alias `name` (`ssh -G`)."""

    @abstractmethod
    def get_repo_names(self, hostname: str, repo_name: str) -> str:
        """Repository JSON: owner.login, name, default_branch and optional parent."""

    @abstractmethod
    def get_branch_names(self) -> str:
        """Local branches, one `<head marker>:<name>:<object id>` line each."""

    @abstractmethod
    def get_merged_branch_names(self, remote_name: str, branch_name: str) -> str:
        """`git branch --merged <remote>/<branch>` output."""

    @abstractmethod
    def get_remote_head_oid(self, remote_name: str, branch_name: str) -> str:
        """Commit id of the remote-tracking ref `<remote>/<branch>`."""

    @abstractmethod
    def get_ls_remote_head_oid(self, url: str, branch_name: str) -> str:
        """`git ls-remote <url> <branch>` output."""

    @abstractmethod
    def get_log(self, branch_name: str) -> str:
        """First-parent commit ids of a branch, newest first, bounded depth."""

    @abstractmethod
    def get_associated_ref_names(self, oid: str) -> str:
        """Full names of local and remote-tracking branches containing `oid`."""

    @abstractmethod
    def get_pull_requests(self, hostname: str, orgs: str, repos: str, query_hashes: str) -> str:
        """Search result JSON for pull requests matching the query terms."""

    @abstractmethod
    def get_uncommitted_changes(self) -> str:
        """`git status --short` output."""

    @abstractmethod
    def get_config(self, key: str) -> str:
        """Value of a git config key."""

    @abstractmethod
    def add_config(self, key: str, value: str) -> str:
        """Add a git config value."""

    @abstractmethod
    def remove_config(self, key: str) -> str:
        """Unset a git config key."""

    @abstractmethod
    def checkout_branch(self, branch_name: str) -> str:
        """Switch the working copy to `branch_name`."""

    @abstractmethod
    def delete_branches(self, branch_names: List[str]) -> str:
        """Force-delete the given local branches in one call."""

    @abstractmethod
    def prune_remote_branches(self, remote_name: str) -> str:
        """Drop stale remote-tracking refs of `remote_name`."""

    @abstractmethod
    def get_worktrees(self) -> str:
        """`git worktree list --porcelain` output."""

    @abstractmethod
    def remove_worktree(self, path: str) -> str:
        """Remove the linked worktree at `path`."""
