"""Tests for GitHubService"""
import json
from unittest.mock import Mock, patch

import pytest
from github import GithubException

from git_branch_pruner.exceptions import AuthenticationError, ConnectorError
from git_branch_pruner.services.git.github import (
    GitHubService,
    get_api_base_url,
    get_graphql_url,
)


@pytest.fixture
def mock_config():
    return {"github_token": "test_token", "pr_search_limit": 50, "pr_commit_limit": 20}


@pytest.fixture
def mock_github():
    with patch("git_branch_pruner.services.git.github.Github") as mock_github_class:
        mock_gh = Mock()
        mock_github_class.return_value = mock_gh
        yield mock_github_class, mock_gh


class TestGitHubServiceInit:
    """Test GitHubService initialization."""

    def test_token_from_config(self, mock_config):
        assert GitHubService(mock_config).github_token == "test_token"

    @patch.dict("os.environ", {"GH_TOKEN": "gh_env_token", "GITHUB_TOKEN": "env_token"})
    def test_gh_token_env_preferred(self):
        assert GitHubService({}).github_token == "gh_env_token"

    @patch.dict("os.environ", {"GITHUB_TOKEN": "env_token"}, clear=True)
    def test_github_token_env(self):
        assert GitHubService({}).github_token == "env_token"

    @patch.dict("os.environ", {}, clear=True)
    def test_anonymous(self, mock_github):
        mock_github_class, _ = mock_github
        service = GitHubService({})

        service._get_client("github.com")

        assert service.github_token is None
        assert mock_github_class.call_args.kwargs["auth"] is None


class TestEndpoints:

    def test_public_host(self):
        assert get_api_base_url("github.com") == "https://api.github.com"
        assert get_graphql_url("github.com") == "https://api.github.com/graphql"

    def test_enterprise_host(self):
        assert get_api_base_url("ghe.example.com") == "https://ghe.example.com/api/v3"
        assert get_graphql_url("ghe.example.com") == "https://ghe.example.com/api/graphql"

    def test_client_per_host_is_reused(self, mock_config, mock_github):
        mock_github_class, _ = mock_github
        service = GitHubService(mock_config)

        service._get_client("github.com")
        service._get_client("github.com")
        service._get_client("ghe.example.com")

        assert mock_github_class.call_count == 2
        base_urls = [c.kwargs["base_url"] for c in mock_github_class.call_args_list]
        assert base_urls == ["https://api.github.com", "https://ghe.example.com/api/v3"]


class TestRepositories:
    """Test repository metadata and access checks."""

    def test_get_repo_names_returns_raw_json(self, mock_config, mock_github):
        _, mock_gh = mock_github
        raw = {"owner": {"login": "owner"}, "name": "repo", "default_branch": "main"}
        mock_gh.get_repo.return_value = Mock(raw_data=raw)

        payload = GitHubService(mock_config).get_repo_names("github.com", "owner/repo")

        assert json.loads(payload) == raw
        mock_gh.get_repo.assert_called_once_with("owner/repo")

    def test_get_repo_names_error(self, mock_config, mock_github):
        _, mock_gh = mock_github
        mock_gh.get_repo.side_effect = GithubException(404, {"message": "Not Found"}, None)

        with pytest.raises(ConnectorError, match="HTTP 404: Not Found"):
            GitHubService(mock_config).get_repo_names("github.com", "owner/repo")

    def test_check_repos(self, mock_config, mock_github):
        _, mock_gh = mock_github

        GitHubService(mock_config).check_repos("github.com", ["owner/repo", "parent/repo"])

        assert [c.args[0] for c in mock_gh.get_repo.call_args_list] == ["owner/repo", "parent/repo"]

    def test_check_repos_inaccessible(self, mock_config, mock_github):
        _, mock_gh = mock_github
        mock_gh.get_repo.side_effect = [Mock(), GithubException(403, {"message": "Forbidden"}, None)]

        with pytest.raises(ConnectorError) as exc_info:
            GitHubService(mock_config).check_repos("github.com", ["owner/repo", "parent/repo"])

        assert exc_info.value.args_list == ["repos", "parent/repo"]


class TestPullRequestSearch:

    def test_query_and_body(self, mock_config, mock_github):
        _, mock_gh = mock_github
        data = {"data": {"search": {"issueCount": 0, "edges": []}}}
        mock_gh.requester.requestJsonAndCheck.return_value = ({}, data)

        body = GitHubService(mock_config).get_pull_requests(
            "github.com", "org:owner", "repo:owner/repo", "hash:abc hash:def"
        )

        assert json.loads(body) == data
        verb, url = mock_gh.requester.requestJsonAndCheck.call_args.args
        query = mock_gh.requester.requestJsonAndCheck.call_args.kwargs["input"]["query"]
        assert (verb, url) == ("POST", "https://api.github.com/graphql")
        assert 'query: "is:pr org:owner repo:owner/repo hash:abc hash:def", last: 50' in query
        assert "commits(last: 20)" in query

    def test_http_error(self, mock_config, mock_github):
        _, mock_gh = mock_github
        mock_gh.requester.requestJsonAndCheck.side_effect = GithubException(502, "Bad Gateway", None)

        with pytest.raises(ConnectorError, match="HTTP 502"):
            GitHubService(mock_config).get_pull_requests("github.com", "", "", "hash:abc")

    @patch.dict("os.environ", {}, clear=True)
    def test_search_requires_token(self, mock_github):
        """Test search without a token fails before any request is sent."""
        _, mock_gh = mock_github

        with pytest.raises(AuthenticationError, match="GH_TOKEN or GITHUB_TOKEN"):
            GitHubService({}).get_pull_requests("github.com", "", "", "hash:abc")

        mock_gh.requester.requestJsonAndCheck.assert_not_called()

    def test_close(self, mock_config, mock_github):
        _, mock_gh = mock_github
        service = GitHubService(mock_config)
        service._get_client("github.com")

        service.close()

        mock_gh.close.assert_called_once()
        assert service._clients == {}
