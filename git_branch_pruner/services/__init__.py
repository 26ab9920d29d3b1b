"""Services for git-branch-pruner."""

from .connector import Connector

__all__ = ["Connector"]
