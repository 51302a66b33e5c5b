"""Shared pytest fixtures and configuration."""

import json
from unittest.mock import Mock, patch

import pytest

from models.config_models import Config, CredentialsConfig

API_ROOT = "https://api.github.com"


@pytest.fixture
def test_env(monkeypatch):
    """
    Set valid test environment variables.

    Lets config be loaded during tests without real credentials. Every
    variable the loader reads is set or cleared so a local .env cannot leak in.
    """
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_test_token_1234567890")
    monkeypatch.setenv("GITHUB_USERNAME", "octocat")
    monkeypatch.setenv("REPOSITORIES", "octocat/alpha, octocat/beta")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    for name in (
        "PORT",
        "GITHUB_API_URL",
        "REQUEST_TIMEOUT",
        "STANDALONE_LOOKBACK_DAYS",
        "STANDALONE_RUN_LIMIT",
        "REPO_PALETTE_SIZE",
        "REFRESH_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    return {
        "github_token": "ghp_test_token_1234567890",
        "username": "octocat",
        "repositories": ("octocat/alpha", "octocat/beta"),
        "log_level": "DEBUG",
    }


@pytest.fixture
def invalid_env(monkeypatch):
    """
    Set up missing environment variables for testing validation.
    """
    monkeypatch.setenv("GITHUB_TOKEN", "")
    monkeypatch.setenv("GITHUB_USERNAME", "")
    monkeypatch.setenv("REPOSITORIES", "")


@pytest.fixture
def config():
    """Config monitoring octocat in two repositories."""
    return Config(
        credentials=CredentialsConfig(github_token="ghp_test_token_1234567890"),
        username="octocat",
        repositories=("octocat/alpha", "octocat/beta"),
    )


@pytest.fixture
def make_pr():
    """Factory for raw GitHub pull request payloads."""
    def _make_pr(number, author="octocat", created_at="2025-01-15T10:00:00Z", **overrides):
        pr = {
            "id": 1000 + number,
            "number": number,
            "title": f"PR {number}",
            "html_url": f"https://github.com/octocat/alpha/pull/{number}",
            "head": {"ref": f"feature-{number}", "sha": f"sha{number:04d}abcdef"},
            "base": {"ref": "main"},
            "created_at": created_at,
            "updated_at": created_at,
            "user": {"login": author},
            "draft": False,
            "mergeable": None,
        }
        pr.update(overrides)
        return pr
    return _make_pr


@pytest.fixture
def make_run():
    """Factory for raw GitHub workflow run payloads."""
    def _make_run(run_id, created_at="2025-01-15T10:00:00Z", **overrides):
        run = {
            "id": run_id,
            "name": f"CI {run_id}",
            "status": "completed",
            "conclusion": "success",
            "created_at": created_at,
            "updated_at": created_at,
            "html_url": f"https://github.com/octocat/alpha/actions/runs/{run_id}",
            "head_branch": "main",
            "head_sha": "0123456789abcdef0123456789abcdef01234567",
            "pull_requests": [],
        }
        run.update(overrides)
        return run
    return _make_run


class FakeGitHubAPI:
    """Stands in for requests.get, answering by URL path.

    Paths that were never registered answer 404 like GitHub does.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, path, payload, status_code=200):
        self.routes[path] = (status_code, payload)

    def __call__(self, url, headers=None, params=None, timeout=None):
        self.calls.append((url, params))
        path = url.replace(API_ROOT, "")
        status_code, payload = self.routes.get(path, (404, {"message": "Not Found"}))

        response = Mock()
        response.status_code = status_code
        response.reason = "OK" if status_code < 300 else "Error"
        response.headers = {"X-RateLimit-Remaining": "4999", "X-RateLimit-Limit": "5000"}
        response.json.return_value = payload
        response.text = json.dumps(payload)
        return response

    def paths_called(self):
        return [url.replace(API_ROOT, "") for url, _ in self.calls]


@pytest.fixture
def github_api():
    """Patch requests.get with a FakeGitHubAPI for the test's duration."""
    api = FakeGitHubAPI()
    with patch("requests.get", side_effect=api):
        yield api
