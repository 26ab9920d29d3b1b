"""Pytest fixtures for git-branch-pruner tests"""
import tempfile
from pathlib import Path

import git
import pytest

from git_branch_pruner.models.remote import Remote

from tests.stubs import StubConnector, branch_line, branch_listing, pr_node, pr_payload


@pytest.fixture
def remote():
    return Remote(name="origin", hostname="github.com", repo_name="owner/repo")


@pytest.fixture
def merged_branch_connector():
    """`main` (default, checked out) and `issue1`, whose PR #1 was merged."""
    return StubConnector(
        get_branch_names=branch_listing(
            branch_line("issue1", "i1"),
            branch_line("main", "m0", head=True),
        ),
        get_remote_head_oid={"issue1": "i1\n"},
        get_log={"issue1": "i1\nm0\n"},
        get_pull_requests=pr_payload(pr_node(1, "issue1", "MERGED", ["i1"])),
    )


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")
        writer.set_value("commit", "gpgsign", "false")

    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch("-M", "main")

    repo.create_remote("origin", "git@github.com:test/test-repo.git")

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_branches(git_repo):
    """`feature` with one own commit and `merged`, already merged into main."""
    repo = git_repo
    repo_path = Path(repo.working_dir)

    repo.git.checkout("-b", "feature")
    (repo_path / "feature.txt").write_text("Feature content\n")
    repo.index.add(["feature.txt"])
    repo.index.commit("Add feature")

    repo.git.checkout("main")
    repo.git.checkout("-b", "merged")
    (repo_path / "merge.txt").write_text("Merge content\n")
    repo.index.add(["merge.txt"])
    repo.index.commit("Feature to merge")

    repo.git.checkout("main")
    repo.git.merge("merged", "--no-ff", "-m", "Merge merged")

    yield repo
