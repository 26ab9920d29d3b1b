"""Display service for pruning results"""

from typing import Optional, Sequence

from rich.console import Console

from git_branch_pruner.constants import SYMBOL_DONE, SYMBOL_FAILED, SYMBOL_SKIPPED
from git_branch_pruner.formatters import (
    format_branch_line,
    format_pull_request,
    get_result_states,
    select_branches,
)
from git_branch_pruner.models.branch import Branch


class DisplayService:
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_dry_run_header(self) -> None:
        self.console.print("[bold]== DRY RUN ==[/bold]")

    def print_step(self, message: str, ok: Optional[bool]) -> None:
        """Report a finished step: ok=True done, False failed, None skipped."""
        if ok is None:
            symbol = f"[bright_black]{SYMBOL_SKIPPED}[/bright_black]"
        elif ok:
            symbol = f"[green]{SYMBOL_DONE}[/green]"
        else:
            symbol = f"[red]{SYMBOL_FAILED}[/red]"
        self.console.print(f"{symbol} {message}")

    def print_branches(self, branches: Sequence[Branch]) -> None:
        if not branches:
            self.console.print("[bright_black]  There are no branches in the current directory[/bright_black]")
            return

        for branch in branches:
            self.console.print(format_branch_line(branch), highlight=False)
            for i, pr in enumerate(branch.pull_requests):
                self.console.print(
                    format_pull_request(pr, is_last=i == len(branch.pull_requests) - 1),
                    highlight=False,
                )

    def print_results(self, branches: Sequence[Branch], dry_run: bool) -> None:
        deleted_states, kept_states = get_result_states(dry_run)

        self.console.print()
        self.console.print("[bold]Deleted branches[/bold]")
        self.print_branches(select_branches(branches, deleted_states))
        self.console.print()

        self.console.print("[bold]Branches not deleted[/bold]")
        self.print_branches(select_branches(branches, kept_states))
        self.console.print()
