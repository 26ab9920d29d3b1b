"""Tests for branch listing"""
import pytest

from git_branch_pruner.exceptions import ConnectorError
from git_branch_pruner.models.branch import Branch
from git_branch_pruner.models.worktree import Worktree
from git_branch_pruner.services.branch_lister import (
    BranchLister,
    apply_tracked_changes,
    apply_worktrees,
    parse_branches,
    parse_merged_branch_names,
    parse_uncommitted_changes,
)

from tests.stubs import StubConnector, branch_line, branch_listing


class TestParsing:
    """Test parsing of raw git listings."""

    def test_parse_branches(self):
        output = branch_listing(
            branch_line("feature", "f1"),
            branch_line("main", "m0", head=True),
        )

        branches = parse_branches(output)

        assert branches == [Branch(name="feature"), Branch(name="main", head=True)]

    def test_parse_branches_detached_head(self):
        """Test the detached HEAD pseudo-branch is listed and recognized."""
        branches = parse_branches("*:(HEAD detached at 1a2b3c):1a2b3c\n :main:m0\n")

        assert branches[0].head is True
        assert branches[0].is_detached is True
        assert branches[1].is_detached is False

    def test_parse_branches_skips_malformed_lines(self):
        assert parse_branches("garbage\n :main:m0\n") == [Branch(name="main")]

    def test_parse_merged_branch_names(self):
        """Test current (*) and other-worktree (+) markers are stripped."""
        output = "  issue1\n* main\n+ wt-branch\n"

        assert parse_merged_branch_names(output) == ["issue1", "main", "wt-branch"]

    def test_parse_uncommitted_changes(self):
        changes = parse_uncommitted_changes(" M README.md\n?? notes.txt\n")

        assert changes[0].path == "README.md"
        assert changes[0].is_untracked is False
        assert changes[1].path == "notes.txt"
        assert changes[1].is_untracked is True


class TestApply:
    """Test the pure annotation helpers."""

    def test_tracked_changes_only_mark_head(self):
        branches = [Branch("main", head=True), Branch("feature")]
        changes = parse_uncommitted_changes(" M README.md\n")

        result = apply_tracked_changes(branches, changes)

        assert result[0].has_tracked_changes is True
        assert result[1].has_tracked_changes is False

    def test_untracked_files_do_not_count(self):
        branches = [Branch("main", head=True)]
        changes = parse_uncommitted_changes("?? scratch.txt\n")

        assert apply_tracked_changes(branches, changes)[0].has_tracked_changes is False

    def test_apply_worktrees(self):
        worktrees = [
            Worktree("/repo", "main", is_main=True, is_locked=False),
            Worktree("/repo-wt", "feature", is_main=False, is_locked=True),
            Worktree("/repo-detached", "", is_main=False, is_locked=False),
        ]
        branches = [Branch("feature"), Branch("main"), Branch("other")]

        result = apply_worktrees(branches, worktrees)

        assert result[0].worktree.path == "/repo-wt"
        assert result[0].worktree.is_locked is True
        assert result[1].worktree.is_main is True
        assert result[2].worktree is None


class TestBranchLister:
    """Test BranchLister against a stub connector."""

    def test_load_marks_default_merged_and_locked(self, remote):
        connector = StubConnector(
            get_branch_names=branch_listing(
                branch_line("issue1", "i1"),
                branch_line("issue2", "i2"),
                branch_line("main", "m0", head=True),
            ),
            get_merged_branch_names="  issue1\n* main\n",
            get_config={"branch.issue2.pruner-locked": "true\n"},
        )

        branches = BranchLister(connector).load(remote, "main")
        by_name = {b.name: b for b in branches}

        assert by_name["main"].is_default is True
        assert by_name["issue1"].is_default is False
        assert by_name["issue1"].is_merged is True
        assert by_name["issue2"].is_merged is False
        assert by_name["issue2"].is_locked is True
        assert by_name["issue1"].is_locked is False
        assert connector.calls_to("get_merged_branch_names") == [("origin", "main")]

    def test_legacy_lock_key(self):
        connector = StubConnector(get_config={"branch.old.pruner-protected": "true\n"})

        assert BranchLister(connector).is_locked("old") is True

    def test_lock_value_must_be_true(self):
        connector = StubConnector(get_config={"branch.old.pruner-locked": "false\n"})

        assert BranchLister(connector).is_locked("old") is False

    def test_merged_listing_failure_propagates(self, remote):
        connector = StubConnector(
            get_merged_branch_names=ConnectorError("git", ["branch", "--merged"], "boom"),
        )

        with pytest.raises(ConnectorError):
            BranchLister(connector).load(remote, "main")

    def test_status_failure_propagates(self):
        connector = StubConnector(get_uncommitted_changes=ConnectorError("git", ["status"], "boom"))

        with pytest.raises(ConnectorError):
            BranchLister(connector).apply_tracked_changes([Branch("main", head=True)])

    def test_worktree_failure_is_not_fatal(self):
        """Test branches come back untouched when worktrees cannot be listed."""
        connector = StubConnector(get_worktrees=ConnectorError("git", ["worktree", "list"], "old git"))
        branches = [Branch("main", head=True)]

        assert BranchLister(connector).apply_worktrees(branches) == branches
