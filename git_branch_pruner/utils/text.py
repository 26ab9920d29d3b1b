"""Helpers for reading command output."""

from typing import List


def split_lines(text: str) -> List[str]:
    """Split command output into lines, dropping empty ones.

    Leading whitespace is kept; some git listings encode state in the
    first columns.
    """
    return [line for line in text.replace("\r\n", "\n").split("\n") if line]
