"""Shared constants for git-branch-pruner."""

from git_branch_pruner.models.pull_request import PullRequestState

# Per-branch git config keys
LOCK_CONFIG_KEY = "branch.{name}.pruner-locked"
LEGACY_LOCK_CONFIG_KEY = "branch.{name}.pruner-protected"  # written by `protect`
REMOTE_CONFIG_KEY = "branch.{name}.remote"
MERGE_CONFIG_KEY = "branch.{name}.merge"

DEFAULT_REMOTE_NAME = "origin"
GH_HOST_ENV = "GH_HOST"

# Hosts whose subdomain aliases collapse to the bare domain
KNOWN_HOSTNAMES = ("github.com", "github.localhost")


# Reasons shown next to a branch that was kept
REASON_LOCKED = "locked"
REASON_WORKTREE_LOCKED = "worktree locked"
REASON_WORKTREE_HERE = "worktree here"
REASON_UNCOMMITTED_CHANGES = "uncommitted changes"


# Symbol constants
SYMBOL_CURRENT_BRANCH = "*"
SYMBOL_DONE = "✔"
SYMBOL_FAILED = "✕"
SYMBOL_SKIPPED = "-"
SYMBOL_TREE_BRANCH = "├─"
SYMBOL_TREE_LAST = "└─"


# CLI colors (Rich color names) for pull request numbers
PR_STATE_COLORS = {
    PullRequestState.OPEN: "green",
    PullRequestState.MERGED: "magenta",
    PullRequestState.CLOSED: "red",
}
DRAFT_PR_COLOR = "bright_black"

PROTECT_DEPRECATION_MSG = "warning: 'protect' is deprecated, please use 'lock' instead"
UNPROTECT_DEPRECATION_MSG = "warning: 'unprotect' is deprecated, please use 'unlock' instead"
