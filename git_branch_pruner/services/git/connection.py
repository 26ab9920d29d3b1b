"""Concrete Connector backed by GitPython and PyGithub."""

import os
from typing import List, Optional, Sequence, Union, TYPE_CHECKING

from git_branch_pruner.services.connector import Connector
from git_branch_pruner.services.git.github import GitHubService
from git_branch_pruner.services.git.operations import GitOperations
from git_branch_pruner.services.git.worktrees import WorktreeService

if TYPE_CHECKING:
    from git_branch_pruner.config import Config


class Connection(Connector):
    """Connector that talks to the local repository and to GitHub."""

    def __init__(self, config: Union["Config", dict], repo_path: Optional[str] = None):
        self.repo_path = repo_path or os.getcwd()
        self.git_ops = GitOperations(self.repo_path, config)
        self.worktree_service = WorktreeService(self.repo_path)
        self.github_service = GitHubService(config)

    def is_local_repo(self) -> bool:
        return self.git_ops.is_local_repo()

    def check_repos(self, hostname: str, repo_names: Sequence[str]) -> None:
        self.github_service.check_repos(hostname, repo_names)

    def get_remote_names(self) -> str:
        return self.git_ops.get_remote_names()

    def get_ssh_config(self, name: str) -> str:
        return self.git_ops.get_ssh_config(name)

    def get_repo_names(self, hostname: str, repo_name: str) -> str:
        return self.github_service.get_repo_names(hostname, repo_name)

    def get_branch_names(self) -> str:
        return self.git_ops.get_branch_names()

    def get_merged_branch_names(self, remote_name: str, branch_name: str) -> str:
        return self.git_ops.get_merged_branch_names(remote_name, branch_name)

    def get_remote_head_oid(self, remote_name: str, branch_name: str) -> str:
        return self.git_ops.get_remote_head_oid(remote_name, branch_name)

    def get_ls_remote_head_oid(self, url: str, branch_name: str) -> str:
        return self.git_ops.get_ls_remote_head_oid(url, branch_name)

    def get_log(self, branch_name: str) -> str:
        return self.git_ops.get_log(branch_name)

    def get_associated_ref_names(self, oid: str) -> str:
        return self.git_ops.get_associated_ref_names(oid)

    def get_pull_requests(self, hostname: str, orgs: str, repos: str, query_hashes: str) -> str:
        return self.github_service.get_pull_requests(hostname, orgs, repos, query_hashes)

    def get_uncommitted_changes(self) -> str:
        return self.git_ops.get_uncommitted_changes()

    def get_config(self, key: str) -> str:
        return self.git_ops.get_config(key)

    def add_config(self, key: str, value: str) -> str:
        return self.git_ops.add_config(key, value)

    def remove_config(self, key: str) -> str:
        return self.git_ops.remove_config(key)

    def checkout_branch(self, branch_name: str) -> str:
        return self.git_ops.checkout_branch(branch_name)

    def delete_branches(self, branch_names: List[str]) -> str:
        return self.git_ops.delete_branches(branch_names)

    def prune_remote_branches(self, remote_name: str) -> str:
        return self.git_ops.prune_remote_branches(remote_name)

    def get_worktrees(self) -> str:
        return self.worktree_service.get_worktrees()

    def remove_worktree(self, path: str) -> str:
        return self.worktree_service.remove_worktree(path)

    def close(self) -> None:
        self.github_service.close()
