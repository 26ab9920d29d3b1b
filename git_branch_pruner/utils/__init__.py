"""Utility functions for git-branch-pruner.

This package provides utility modules:
- threading: worker sizing and cooperative cancellation
- text: command output helpers
"""

from .text import split_lines
from .threading import (
    CancellationToken,
    is_free_threading_enabled,
    get_python_threading_mode,
    get_optimal_worker_count,
    get_threading_info,
)

__all__ = [
    "CancellationToken",
    "is_free_threading_enabled",
    "get_python_threading_mode",
    "get_optimal_worker_count",
    "get_threading_info",
    "split_lines",
]
