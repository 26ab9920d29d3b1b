"""Pull request model and related enums"""
from enum import Enum
from dataclasses import dataclass
from typing import Tuple


class PullRequestState(Enum):
    """State of a pull request on the code host."""
    CLOSED = "closed"
    MERGED = "merged"
    OPEN = "open"


@dataclass(frozen=True)
class PullRequest:
    """A pull request associated with one or more local branches."""
    name: str  # head branch name
    state: PullRequestState
    is_draft: bool
    number: int
    commits: Tuple[str, ...]  # last N commit ids of the PR
    url: str
    author: str
