"""Primary remote resolution.

Parses `git remote -v`, picks the remote the pruner works against and
works out which code host it lives on. Accepted URL forms:

    ssh://[user@]host.xz[:port]/path/to/repo.git/
    git://host.xz[:port]/path/to/repo.git/
    http[s]://host.xz[:port]/path/to/repo.git/
    [user@]host.xz:path/to/repo.git/        (scp-like, ssh)
"""

import os
import re
from typing import List, Optional, Union, TYPE_CHECKING
from urllib.parse import urlsplit

from git_branch_pruner.constants import DEFAULT_REMOTE_NAME, GH_HOST_ENV, KNOWN_HOSTNAMES
from git_branch_pruner.exceptions import ConnectorError, NotFoundError
from git_branch_pruner.logging_config import get_logger
from git_branch_pruner.models.remote import Remote
from git_branch_pruner.services.connector import Connector
from git_branch_pruner.utils.text import split_lines
from git_branch_pruner.utils.threading import CancellationToken

if TYPE_CHECKING:
    from git_branch_pruner.config import Config

logger = get_logger(__name__)

HAS_SCHEME = re.compile(r"^[^:]+://")
SCP_LIKE_URL = re.compile(r"^([^@]+@)?([^:]+):(/?.+)$")


def parse_remote(line: str) -> Optional[Remote]:
    """Parse one `<name> <url> (fetch|push)` line; None if it is malformed."""
    fields = line.split()
    if len(fields) != 3:
        return None

    name, ref = fields[0], fields[1]
    if not HAS_SCHEME.match(ref):
        match = SCP_LIKE_URL.match(ref)
        if match:
            user, host, path = match.groups()
            ref = f"ssh://{user or ''}{host}/{path.lstrip('/')}"

    try:
        parsed = urlsplit(ref)
    except ValueError:
        return None

    # netloc keeps the port, drop any credentials
    hostname = parsed.netloc.rpartition("@")[2]
    repo_name = parsed.path.strip("/")
    if repo_name.endswith(".git"):
        repo_name = repo_name[:-len(".git")]

    return Remote(name=name, hostname=hostname, repo_name=repo_name)


def parse_remotes(output: str) -> List[Remote]:
    """Parse `git remote -v`. Any malformed line invalidates the whole listing."""
    remotes = []
    for line in split_lines(output):
        remote = parse_remote(line)
        if remote is None:
            logger.debug(f"Unparseable remote definition: {line!r}")
            return []
        remotes.append(remote)
    return remotes


def get_primary_remote(remotes: List[Remote], preferred: str = DEFAULT_REMOTE_NAME) -> Remote:
    """Prefer the remote named `preferred`, else the first one listed.

    Raises:
        NotFoundError: If there are no remotes
    """
    if not remotes:
        raise NotFoundError("remote")

    for remote in remotes:
        if remote.name == preferred:
            return remote
    return remotes[0]


def find_hostname(ssh_config_lines: List[str], default: str) -> str:
    """Pick the `hostname` value out of `ssh -G` output."""
    for line in ssh_config_lines:
        key, _, value = line.partition(" ")
        if key == "hostname" and value:
            return value
    return default


def normalize_hostname(host: str) -> str:
    """Lowercase and collapse subdomains of known code hosts (api.github.com -> github.com)."""
    hostname = host.lower()
    for known in KNOWN_HOSTNAMES:
        if hostname.endswith("." + known):
            return known
    return hostname


class RemoteResolver:
    """Finds the primary remote and the code host it points at."""

    def __init__(
        self,
        connector: Connector,
        config: Union["Config", dict, None] = None,
        cancellation: Optional[CancellationToken] = None,
    ):
        self.connector = connector
        config = config or {}
        self.preferred_remote = config.get("primary_remote") or DEFAULT_REMOTE_NAME
        self.host_override = config.get("gh_host") or os.environ.get(GH_HOST_ENV)
        self.cancellation = cancellation or CancellationToken()

    def resolve(self) -> Remote:
        """Return the primary remote with its hostname resolved.

        Raises:
            NotFoundError: If the working copy has no remotes
            ConnectorError: If the remotes cannot be listed
        """
        self.cancellation.raise_if_cancelled()
        remote = get_primary_remote(
            parse_remotes(self.connector.get_remote_names()), self.preferred_remote
        )

        if self.host_override:
            logger.debug(f"Using hostname override {self.host_override}")
            return Remote(remote.name, self.host_override, remote.repo_name)

        self.cancellation.raise_if_cancelled()
        try:
            ssh_config = self.connector.get_ssh_config(remote.hostname)
        except ConnectorError as e:
            logger.debug(f"SSH config lookup for {remote.hostname} failed, using it as-is: {e}")
            return remote

        hostname = normalize_hostname(find_hostname(split_lines(ssh_config), remote.hostname))
        logger.debug(f"Resolved remote {remote.name} -> {hostname}/{remote.repo_name}")
        return Remote(remote.name, hostname, remote.repo_name)
