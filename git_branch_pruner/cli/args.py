"""Command-line argument parsing for git-branch-pruner."""

import argparse

from git_branch_pruner.__version__ import __version__
from git_branch_pruner.config import TARGET_STATES


def _add_branch_command(subparsers, name: str, help_text: str) -> None:
    command = subparsers.add_parser(name, help=help_text, description=help_text)
    command.add_argument("branches", nargs="+", metavar="BRANCH", help="Branch names")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-branch-pruner",
        description="Delete the local branches whose pull requests have been merged",
        epilog="GitHub access uses GH_TOKEN or GITHUB_TOKEN. GH_HOST overrides the detected host.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"git-branch-pruner {__version__}")
    parser.add_argument(
        "--state",
        choices=sorted(TARGET_STATES),
        default="merged",
        help="PR state that makes a branch deletable; closed includes merged (default: merged)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show branches to delete without actually deleting them",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--remote",
        default="origin",
        metavar="NAME",
        help="Preferred remote; the first remote is used when it does not exist (default: origin)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        metavar="N",
        help="Number of parallel workers (default: auto-detect based on CPU and threading mode)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    _add_branch_command(subparsers, "lock", "Lock branches to prevent them from being deleted")
    _add_branch_command(subparsers, "unlock", "Unlock branches to allow them to be deleted")
    _add_branch_command(subparsers, "protect", "(Deprecated) use 'lock' instead")
    _add_branch_command(subparsers, "unprotect", "(Deprecated) use 'unlock' instead")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
