"""Ancestry trimming: which commits of a branch belong to that branch alone."""

import re
from dataclasses import replace
from typing import Iterable, List, Optional

from git_branch_pruner.constants import REMOTE_CONFIG_KEY
from git_branch_pruner.exceptions import ConnectorError
from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.branch import Branch
from git_branch_pruner.models.remote import Remote
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.utils.text import split_lines
from git_branch_pruner.utils.threading import CancellationToken

logger = get_logger(__name__)

REF_NAME_PREFIX = re.compile(r"^refs/(?:heads|remotes/.+?)/")


def extract_branch_names(ref_names: Iterable[str]) -> List[str]:
    """refs/heads/x and refs/remotes/<remote>/x both become x."""
    return [REF_NAME_PREFIX.sub("", name, count=1) for name in ref_names]


class AncestryTrimmer:
    """Computes the newest-first run of commits owned by one branch.

    The first element of the result is the branch's own head commit, which
    is what gets compared against pull request commits. A branch with a
    remote-tracking head, or one git already reports as merged, only needs
    that one commit. Otherwise the log is walked from the newest commit and
    stops at the first commit some unrelated branch also contains.
    """

    def __init__(self, connector: Connector, cancellation: Optional[CancellationToken] = None):
        self.connector = connector
        self.cancellation = cancellation or CancellationToken()

    def trim(
        self,
        oids: List[str],
        remote_head_oid: str,
        is_merged: bool,
        branch_name: str,
        default_branch_name: str,
    ) -> List[str]:
        """Return the branch-owned prefix of `oids` (newest first).

        Raises:
            ConnectorError: If a containment lookup fails
        """
        if not oids:
            return []
        if remote_head_oid or is_merged:
            return [oids[0]]

        results: List[str] = []
        child_names: List[str] = []

        for i, oid in enumerate(oids):
            self.cancellation.raise_if_cancelled()
            names = extract_branch_names(
                split_lines(self.connector.get_associated_ref_names(oid))
            )

            if i == 0:
                if default_branch_name in names:
                    # Newest commit is already on the default branch
                    return []
                # Branches sharing the head commit, e.g. the fork branch a PR checkout shadows
                child_names = [name for name in names if name != branch_name]

            for name in names:
                if name != branch_name and name not in child_names:
                    logger.debug(f"{branch_name}: {oid} is shared with {name}, stopping")
                    return results

            results.append(oid)

        return results

    def resolve_remote_head_oid(self, remote: Remote, branch_name: str) -> str:
        """Commit id of the branch on its remote, or "" if it has none.

        Tries the `<remote>/<branch>` tracking ref first, then asks the
        branch's configured remote directly (covers branches tracking a fork).
        """
        self.cancellation.raise_if_cancelled()
        try:
            lines = split_lines(self.connector.get_remote_head_oid(remote.name, branch_name))
            if lines:
                return lines[0].strip()
        except ConnectorError as e:
            logger.debug(f"No tracking ref {remote.name}/{branch_name}: {e}")

        self.cancellation.raise_if_cancelled()
        try:
            remote_urls = split_lines(
                self.connector.get_config(REMOTE_CONFIG_KEY.format(name=branch_name))
            )
        except ConnectorError:
            return ""
        if not remote_urls:
            return ""

        self.cancellation.raise_if_cancelled()
        try:
            fields = self.connector.get_ls_remote_head_oid(remote_urls[0].strip(), branch_name).split()
        except ConnectorError as e:
            logger.debug(f"ls-remote for {branch_name} failed: {e}")
            return ""
        return fields[0] if fields else ""

    def load_commits(self, remote: Remote, branch: Branch, default_branch_name: str) -> Branch:
        """Fill in remote_head_oid and the trimmed commits of one branch.

        Raises:
            ConnectorError: If the branch log or a containment lookup fails
        """
        if branch.name == default_branch_name or branch.is_detached:
            return replace(branch, commits=())

        remote_head_oid = self.resolve_remote_head_oid(remote, branch.name)

        self.cancellation.raise_if_cancelled()
        oids = split_lines(self.connector.get_log(branch.name))

        commits = self.trim(oids, remote_head_oid, branch.is_merged, branch.name, default_branch_name)
        logger.debug(f"{branch.name}: {len(commits)} own commit(s), remote head {remote_head_oid or '-'}")
        return replace(branch, remote_head_oid=remote_head_oid, commits=tuple(commits))
