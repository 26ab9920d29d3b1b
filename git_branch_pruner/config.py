"""Configuration handling for git-branch-pruner"""

from dataclasses import dataclass
from typing import Optional

from git_branch_pruner.models.pull_request import PullRequestState

TARGET_STATES = {
    "merged": PullRequestState.MERGED,
    "closed": PullRequestState.CLOSED,
}


@dataclass
class Config:
    """Configuration for git-branch-pruner with validation."""

    # Which PR state makes a branch deletable: merged, closed (closed includes merged)
    target_state: str = "merged"

    # Execution modes
    dry_run: bool = False
    verbose: bool = False
    debug: bool = False
    workers: Optional[int] = None  # Number of parallel workers (None = auto-detect)

    # Code host
    github_token: Optional[str] = None
    gh_host: Optional[str] = None
    primary_remote: str = "origin"

    # Fetch limits
    log_depth: int = 30
    pr_commit_limit: int = 100
    pr_search_limit: int = 100
    query_length_limit: int = 256

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_target_state()
        self._validate_positive("log_depth")
        self._validate_positive("pr_commit_limit")
        self._validate_positive("pr_search_limit")
        self._validate_positive("query_length_limit")
        self._validate_workers()
        self._validate_primary_remote()

    def _validate_target_state(self):
        """Validate target_state is one of allowed values."""
        if self.target_state not in TARGET_STATES:
            raise ValueError(
                f"target_state must be one of {sorted(TARGET_STATES)}, got '{self.target_state}'"
            )

    def _validate_positive(self, name: str):
        value = getattr(self, name)
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")

    def _validate_workers(self):
        """Validate workers is positive when given."""
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def _validate_primary_remote(self):
        if not self.primary_remote or not self.primary_remote.strip():
            raise ValueError("primary_remote cannot be empty")
        self.primary_remote = self.primary_remote.strip()

    @property
    def pull_request_state(self) -> PullRequestState:
        """target_state as a PullRequestState."""
        return TARGET_STATES[self.target_state]

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "target_state": self.target_state,
            "dry_run": self.dry_run,
            "verbose": self.verbose,
            "debug": self.debug,
            "workers": self.workers,
            "github_token": self.github_token,
            "gh_host": self.gh_host,
            "primary_remote": self.primary_remote,
            "log_depth": self.log_depth,
            "pr_commit_limit": self.pr_commit_limit,
            "pr_search_limit": self.pr_search_limit,
            "query_length_limit": self.query_length_limit,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary, ignoring unknown keys."""
        known_fields = set(cls.__dataclass_fields__)
        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)
