"""Worktree operations service for git-branch-pruner."""

from typing import List, Optional

import git

from git_branch_pruner.exceptions import ConnectorError
from git_branch_pruner.models.worktree import Worktree
from git_branch_pruner.logging_config import get_logger

logger = get_logger(__name__)

BRANCH_REF_PREFIX = "branch refs/heads/"


def parse_worktrees(output: str) -> List[Worktree]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached")
        locked [reason]                 (optional)
        (blank line between worktrees)

    The first entry is always the main working tree.
    """
    worktrees: List[Worktree] = []
    current: Optional[dict] = None

    for line in output.replace("\r\n", "\n").split("\n"):
        line = line.strip()
        if not line:
            continue

        if line.startswith("worktree "):
            if current is not None:
                worktrees.append(Worktree(**current))
            current = {
                "path": line[len("worktree "):],
                "branch_name": "",
                "is_main": not worktrees,
                "is_locked": False,
            }
        elif current is None:
            continue
        elif line.startswith(BRANCH_REF_PREFIX):
            current["branch_name"] = line[len(BRANCH_REF_PREFIX):]
        elif line == "locked" or line.startswith("locked "):
            current["is_locked"] = True

    if current is not None:
        worktrees.append(Worktree(**current))

    return worktrees


class WorktreeService:
    """Service for listing and removing git worktrees."""

    def __init__(self, repo_path: str):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the git repository
        """
        self.repo_path = repo_path

    def _get_repo(self) -> git.Repo:
        """Get a fresh git.Repo instance for each call to ensure thread safety."""
        return git.Repo(self.repo_path, search_parent_directories=True)

    def get_worktrees(self) -> str:
        """Return the raw porcelain worktree listing.

        Raises:
            ConnectorError: If git cannot list worktrees
        """
        try:
            output = self._get_repo().git.worktree("list", "--porcelain")
        except git.exc.GitCommandError as e:
            stderr = (e.stderr or "").strip()
            raise ConnectorError("git", ["worktree", "list", "--porcelain"], stderr) from e

        logger.debug(f"Found {len(parse_worktrees(output))} worktrees")
        return output

    def remove_worktree(self, path: str) -> str:
        """Remove the worktree at the specified path.

        Raises:
            ConnectorError: If git refuses, e.g. the worktree is dirty or locked
        """
        try:
            output = self._get_repo().git.worktree("remove", path)
        except git.exc.GitCommandError as e:
            # Extract detailed error information from GitCommandError
            stderr = (e.stderr or "").strip()
            if stderr:
                error_msg = f"git worktree remove failed (exit {e.status}): {stderr}"
            else:
                error_msg = f"git worktree remove failed with exit code {e.status}"

            logger.error(f"Failed to remove worktree at {path}: {error_msg}")
            raise ConnectorError("git", ["worktree", "remove", path], error_msg) from e

        logger.info(f"Removed worktree at {path}")
        return output
