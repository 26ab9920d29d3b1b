"""Git operations service"""

import time
from typing import List, Union, TYPE_CHECKING

import git

from git_branch_pruner.exceptions import ConnectorError
from git_branch_pruner.logging_config import get_logger

if TYPE_CHECKING:
    from git_branch_pruner.config import Config

logger = get_logger(__name__)

MASKED_OUTPUT = "*****"


class GitOperations:
    """Runs the git (and ssh) commands the pruner needs and returns their raw output."""

    def __init__(self, repo_path: str, config: Union["Config", dict]):
        """Initialize the service.

        Args:
            repo_path: Path inside the git repository (string path, not repo object)
            config: Configuration dictionary or Config object
        """
        self.repo_path = repo_path
        self.config = config
        self.log_depth = config.get("log_depth", 30)

    def _get_repo(self) -> git.Repo:
        """Get a thread-safe git.Repo instance.

        Creates a new repo instance for each call to ensure thread safety.
        GitPython repos are lightweight - they don't clone, just open the existing repo.
        """
        return git.Repo(self.repo_path, search_parent_directories=True)

    def _run(self, command: List[str], mask_output: bool = False) -> str:
        """Execute a command in the repository and return its stdout.

        Only the final newline is stripped, so column-sensitive output
        (`git status --short`, `git branch`) keeps its leading markers.

        Raises:
            ConnectorError: If the command exits non-zero or cannot be started
        """
        start = time.monotonic()
        try:
            output = self._get_repo().git.execute(command)
        except git.exc.GitCommandError as e:
            stderr = (e.stderr or "").strip()
            logger.debug(f"{command} failed (exit {e.status}): {stderr}")
            raise ConnectorError(command[0], command[1:], stderr or f"exit status {e.status}") from e
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise ConnectorError(command[0], command[1:], f"not a git repository: {e}") from e

        duration = time.monotonic() - start
        shown = MASKED_OUTPUT if mask_output else repr(output)
        logger.debug(f"[{duration:.3f}s] run {command} -> {shown}")
        return output

    def _git(self, *args: str) -> str:
        return self._run(["git", *args])

    def is_local_repo(self) -> bool:
        try:
            repo = self._get_repo()
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError):
            return False
        return not repo.bare

    def get_remote_names(self) -> str:
        return self._git("remote", "-v")

    def get_ssh_config(self, name: str) -> str:
        # The resolved configuration may contain identity file paths and user names
        return self._run(["ssh", "-T", "-G", name], mask_output=True)

    def get_branch_names(self) -> str:
        return self._git(
            "branch", "-v", "--no-abbrev",
            "--format=%(HEAD):%(refname:lstrip=2):%(objectname)",
        )

    def get_merged_branch_names(self, remote_name: str, branch_name: str) -> str:
        return self._git("branch", "--merged", f"{remote_name}/{branch_name}")

    def get_remote_head_oid(self, remote_name: str, branch_name: str) -> str:
        return self._git("rev-parse", f"{remote_name}/{branch_name}")

    def get_ls_remote_head_oid(self, url: str, branch_name: str) -> str:
        return self._git("ls-remote", url, branch_name)

    def get_log(self, branch_name: str) -> str:
        return self._git(
            "log", "--first-parent", f"--max-count={self.log_depth}",
            "--format=%H", branch_name, "--",
        )

    def get_associated_ref_names(self, oid: str) -> str:
        return self._git("branch", "--all", "--format=%(refname)", "--contains", oid)

    def get_uncommitted_changes(self) -> str:
        return self._git("status", "--short")

    def get_config(self, key: str) -> str:
        return self._git("config", "--get", key)

    def add_config(self, key: str, value: str) -> str:
        return self._git("config", "--add", key, value)

    def remove_config(self, key: str) -> str:
        return self._git("config", "--unset", key)

    def checkout_branch(self, branch_name: str) -> str:
        return self._git("checkout", "--quiet", branch_name)

    def delete_branches(self, branch_names: List[str]) -> str:
        return self._git("branch", "-D", *branch_names)

    def prune_remote_branches(self, remote_name: str) -> str:
        return self._git("remote", "prune", remote_name)
