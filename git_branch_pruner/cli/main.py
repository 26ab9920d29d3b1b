"""Command-line interface for git-branch-pruner"""

import os
import signal
import sys
from contextlib import nullcontext

from rich.console import Console
from rich.markup import escape

from git_branch_pruner.cli.args import parse_args
from git_branch_pruner.config import Config
from git_branch_pruner.constants import PROTECT_DEPRECATION_MSG, UNPROTECT_DEPRECATION_MSG
from git_branch_pruner.core import BranchPruner
from git_branch_pruner.exceptions import NotAGitRepositoryError
from git_branch_pruner.logging_config import get_logger, setup_logging
from git_branch_pruner.services.display_service import DisplayService
from git_branch_pruner.services.git import Connection
from git_branch_pruner.utils.threading import CancellationToken, get_threading_info

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)

FETCHING_MSG = "Fetching pull requests..."
DELETING_MSG = "Deleting branches..."


def _install_interrupt_handler(cancellation: CancellationToken):
    """Cancel in-flight work before the interrupt unwinds the main thread.

    Returns the previous handler.
    """

    def _signal_handler(signum, frame):
        cancellation.cancel()
        raise KeyboardInterrupt

    return signal.signal(signal.SIGINT, _signal_handler)


def _spinner(message: str, debug: bool):
    # Spinner output would interleave with debug logs
    return nullcontext() if debug else console.status(message)


def run_prune(pruner: BranchPruner, config: Config, display: DisplayService) -> int:
    if config.dry_run:
        display.print_dry_run_header()

    try:
        with _spinner(FETCHING_MSG, config.debug):
            remote = pruner.get_remote()
            branches = pruner.get_branches(remote, config.target_state, config.dry_run)
    except Exception:
        display.print_step(FETCHING_MSG, False)
        raise
    display.print_step(FETCHING_MSG, True)

    if config.dry_run:
        display.print_step(DELETING_MSG, None)
    else:
        with _spinner(DELETING_MSG, config.debug):
            # A branch checked out in a linked worktree cannot be deleted
            _, worktree_errors = pruner.delete_worktrees(branches)
            branches = pruner.delete_branches(branches)
            pruner.prune_remote_branches(remote)
        for error in worktree_errors:
            err_console.print(f"[yellow]Warning: {escape(str(error))}[/yellow]")
        display.print_step(DELETING_MSG, True)

    display.print_results(branches, config.dry_run)
    return 0


def run_lock(pruner: BranchPruner, command: str, branch_names) -> int:
    if command == "protect":
        err_console.print(PROTECT_DEPRECATION_MSG)
    elif command == "unprotect":
        err_console.print(UNPROTECT_DEPRECATION_MSG)

    if command in ("lock", "protect"):
        for name in pruner.lock_branches(branch_names):
            console.print(f"Locked {escape(name)}", highlight=False)
    else:
        for name in pruner.unlock_branches(branch_names):
            console.print(f"Unlocked {escape(name)}", highlight=False)
    return 0


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)

    log_file = setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    cancellation = CancellationToken()
    previous_handler = _install_interrupt_handler(cancellation)
    connection = None

    try:
        config = Config(
            target_state=parsed_args.state,
            dry_run=parsed_args.dry_run,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
            workers=parsed_args.workers,
            primary_remote=parsed_args.remote,
        )

        if parsed_args.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            threading_info = get_threading_info()
            console.print("[yellow]Threading Information:[/yellow]")
            console.print(f"  Python version: {threading_info['python_version']}")
            console.print(f"  Threading mode: {threading_info['mode']}")
            console.print(f"  Optimal workers: {threading_info['optimal_workers']}")
            console.print(f"  Log file: {escape(str(log_file))}", highlight=False)

        connection = Connection(config, os.getcwd())
        if not connection.is_local_repo():
            raise NotAGitRepositoryError(os.getcwd())

        pruner = BranchPruner(connection, config, cancellation)
        if parsed_args.command:
            return run_lock(pruner, parsed_args.command, parsed_args.branches)
        return run_prune(pruner, config, DisplayService(console))
    except KeyboardInterrupt:
        cancellation.cancel()
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        if parsed_args.debug:
            err_console.print_exception()
        return 1
    finally:
        if connection is not None:
            connection.close()
        signal.signal(signal.SIGINT, previous_handler)


if __name__ == "__main__":
    sys.exit(main())
