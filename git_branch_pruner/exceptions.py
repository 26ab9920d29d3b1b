"""Custom exceptions for git-branch-pruner"""

from typing import Optional, Sequence


class BranchPrunerError(Exception):
    """Base exception for all git-branch-pruner errors."""
    pass


class NotFoundError(BranchPrunerError):
    """Exception raised when the working copy has no usable remote."""

    def __init__(self, what: str = "remote"):
        self.what = what
        super().__init__(f"{what} not found")


class NotAGitRepositoryError(BranchPrunerError):
    """Exception raised when running outside of a git work tree."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        super().__init__("must be run from inside a git repository")


class ConnectorError(BranchPrunerError):
    """Exception raised when an external command or API call fails."""

    def __init__(self, command: str, args: Sequence[str] = (), message: Optional[str] = None):
        self.command = command
        self.args_list = list(args)
        self.message = message

        error_msg = f"failed to run external command: {command}, args: {self.args_list}"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class PullRequestDecodeError(BranchPrunerError):
    """Exception raised when the code host returns a payload we cannot decode."""

    def __init__(self, message: str, payload: str = ""):
        self.message = message
        self.payload = payload
        super().__init__(f"error decoding pull requests: {message}")


class UnexpectedPullRequestStateError(PullRequestDecodeError):
    """Exception raised for a pull request state outside OPEN, MERGED and CLOSED."""

    def __init__(self, state: str, payload: str = ""):
        self.state = state
        super().__init__(f"unexpected pull request state: {state}", payload)


class OperationCancelledError(BranchPrunerError):
    """Exception raised when a run is cancelled before it completes."""

    def __init__(self):
        super().__init__("operation cancelled")


class RepositoryDecodeError(BranchPrunerError):
    """Exception raised when repository metadata from the code host cannot be decoded."""

    def __init__(self, message: str, payload: str = ""):
        self.message = message
        self.payload = payload
        super().__init__(f"error decoding repository: {message}")


class AuthenticationError(BranchPrunerError):
    """Exception raised when a code host call needs a token and none is configured."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(
            f"GitHub token required to search pull requests on {hostname}: "
            "set GH_TOKEN or GITHUB_TOKEN"
        )
