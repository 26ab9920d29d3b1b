"""Tests for result display and formatters"""
import io

from rich.console import Console

from git_branch_pruner.formatters import (
    format_branch_line,
    format_pull_request,
    get_kept_reason,
    get_pr_color,
    get_result_states,
)
from git_branch_pruner.models.branch import Branch, BranchState
from git_branch_pruner.models.pull_request import PullRequest, PullRequestState
from git_branch_pruner.models.worktree import Worktree
from git_branch_pruner.services.display_service import DisplayService


def make_pr(number, state=PullRequestState.MERGED, is_draft=False):
    return PullRequest(
        name="topic",
        state=state,
        is_draft=is_draft,
        number=number,
        commits=(),
        url=f"https://github.com/owner/repo/pull/{number}",
        author="octocat",
    )


def render(callback):
    output = io.StringIO()
    callback(DisplayService(Console(file=output, width=200, color_system=None)))
    return output.getvalue()


class TestFormatters:

    def test_pr_colors(self):
        assert get_pr_color(PullRequestState.OPEN, False) == "green"
        assert get_pr_color(PullRequestState.OPEN, True) == "bright_black"
        assert get_pr_color(PullRequestState.MERGED, False) == "magenta"
        assert get_pr_color(PullRequestState.CLOSED, False) == "red"

    def test_format_pull_request(self):
        line = format_pull_request(make_pr(12), is_last=True)

        assert line.startswith("    └─ [magenta]#12[/magenta]")
        assert "https://github.com/owner/repo/pull/12" in line

    def test_head_branch_markup(self):
        assert format_branch_line(Branch("main", head=True)) == "* [green]main[/green]"
        assert format_branch_line(Branch("topic")) == "  topic"

    def test_branch_name_is_escaped(self):
        assert format_branch_line(Branch("[red]x")) == "  \\[red]x"

    def test_kept_reasons(self):
        linked = Worktree("/wt", "topic", is_main=False, is_locked=False)

        assert get_kept_reason(Branch("a", is_locked=True)) == "locked"
        assert get_kept_reason(Branch("a", worktree=Worktree("/wt", "a", False, True))) == "worktree locked"
        assert get_kept_reason(Branch("a", head=True, worktree=linked)) == "worktree here"
        assert get_kept_reason(Branch("a", head=True, has_tracked_changes=True,
                                      pull_requests=(make_pr(1),))) == "uncommitted changes"
        assert get_kept_reason(Branch("a")) == ""

    def test_result_states(self):
        assert get_result_states(True) == ((BranchState.DELETABLE,), (BranchState.NOT_DELETABLE,))
        assert get_result_states(False)[0] == (BranchState.DELETED,)


class TestDisplayService:
    """Test rendered output."""

    def test_print_results(self):
        branches = [
            Branch("issue1", state=BranchState.DELETED, pull_requests=(make_pr(1), make_pr(2))),
            Branch("main", head=True, state=BranchState.NOT_DELETABLE),
            Branch("wip", state=BranchState.NOT_DELETABLE, is_locked=True),
        ]

        text = render(lambda display: display.print_results(branches, dry_run=False))

        deleted, kept = text.split("Branches not deleted")
        assert "Deleted branches" in deleted
        assert "issue1" in deleted
        assert "├─ #1" in deleted
        assert "└─ #2" in deleted
        assert "* main" in kept
        assert "wip [locked]" in kept

    def test_dry_run_lists_deletable_as_deleted(self):
        branches = [Branch("issue1", state=BranchState.DELETABLE)]

        text = render(lambda display: display.print_results(branches, dry_run=True))

        deleted, kept = text.split("Branches not deleted")
        assert "issue1" in deleted
        assert "There are no branches in the current directory" in kept

    def test_print_step(self):
        text = render(lambda display: (
            display.print_step("Fetching pull requests...", True),
            display.print_step("Deleting branches...", None),
            display.print_step("Fetching pull requests...", False),
        ))

        assert text.splitlines() == [
            "✔ Fetching pull requests...",
            "- Deleting branches...",
            "✕ Fetching pull requests...",
        ]
