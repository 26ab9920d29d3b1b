"""Remote model"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Remote:
    """The primary remote of the working copy."""
    name: str
    hostname: str
    repo_name: str  # owner/name, without a trailing .git
