"""Threading utilities: worker sizing and cooperative cancellation."""

import os
import sys
import threading
from typing import Dict, Any, Optional

from git_branch_pruner.exceptions import OperationCancelledError


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with GIL disabled (free-threading mode)
        False if running with GIL enabled or Python < 3.13
    """
    return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()


def get_python_threading_mode() -> str:
    """Get a description of the current threading mode."""
    if not hasattr(sys, "_is_gil_enabled"):
        return "GIL-enabled (Python < 3.13)"
    return "GIL-enabled" if sys._is_gil_enabled() else "free-threading"


def get_optimal_worker_count(user_specified: Optional[int] = None) -> int:
    """Calculate optimal worker count based on threading mode and CPU count.

    Args:
        user_specified: User-specified worker count, if provided

    Returns:
        Optimal number of workers for parallel processing
    """
    if user_specified is not None and user_specified > 0:
        return user_specified

    cpu_count = os.cpu_count() or 1

    if is_free_threading_enabled():
        return min(64, cpu_count * 2)

    # Work is dominated by waiting on git and the code host
    return min(32, cpu_count + 4)


def get_threading_info() -> Dict[str, Any]:
    """Get information about Python threading configuration."""
    return {
        "mode": get_python_threading_mode(),
        "free_threading": is_free_threading_enabled(),
        "cpu_count": os.cpu_count() or 1,
        "optimal_workers": get_optimal_worker_count(),
        "python_version": f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}",
    }


class CancellationToken:
    """Cooperative cancellation shared by every task of a run.

    Tasks call raise_if_cancelled() before each external call; once
    cancel() is called every outstanding task fails with
    OperationCancelledError.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError()
