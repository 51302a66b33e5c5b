"""GitHub REST API client for the PR monitor.

Every call is a single authenticated GET. There is no retry and no
rate-limit waiting: a non-2xx response raises ``GitHubAPIError`` straight
away and the caller decides whether to degrade or propagate.
"""

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

FINE_GRAINED_TOKEN_PREFIX = "github_pat_"

# Errors a caller degrades on when a single fetch unit fails: transport and
# HTTP errors (GitHubAPIError included) plus unexpected payload shapes.
FETCH_ERRORS = (requests.RequestException, AttributeError, KeyError, TypeError, ValueError)


class GitHubAPIError(requests.HTTPError):
    """Non-2xx response from the GitHub API.

    Carries the HTTP status code, the status text and the raw response body.
    """

    def __init__(self, url: str, status_code: int, reason: str, body: str, response=None):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(
            f"GitHub API error: {status_code} {reason} - {body}",
            response=response,
        )


def build_auth_header(token: str) -> str:
    """Pick the Authorization scheme for a token.

    Fine-grained personal access tokens use ``Bearer``; classic tokens
    use the legacy ``token`` scheme.
    """
    if token.startswith(FINE_GRAINED_TOKEN_PREFIX):
        return f"Bearer {token}"
    return f"token {token}"


class GitHubClient:
    """Minimal GitHub API client covering pulls, reviews, comments and runs."""

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: Optional[float] = None,
    ):
        """Initialize GitHub API client.

        Args:
            token: GitHub personal access token (classic or fine-grained)
            base_url: REST API root, without trailing slash
            timeout: Optional per-request timeout in seconds (None waits forever)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": build_auth_header(token),
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "GitHub-Monitor",
        }

    def request(self, url: str, params: Optional[dict] = None) -> Any:
        """GET a fully-qualified API URL and return the parsed JSON body.

        Args:
            url: GitHub API URL to request
            params: Optional query parameters

        Returns:
            Parsed JSON (list or dict)

        Raises:
            GitHubAPIError: On any non-2xx response
            requests.RequestException: On connection failures
        """
        logger.debug(f"Making GitHub API request to: {url} {params or ''}")

        response = requests.get(url, headers=self.headers, params=params, timeout=self.timeout)

        remaining = response.headers.get("X-RateLimit-Remaining")
        limit = response.headers.get("X-RateLimit-Limit")
        if remaining and limit:
            logger.debug(f"Rate limit: {remaining}/{limit} remaining")

        if not 200 <= response.status_code < 300:
            logger.error(
                f"GitHub API error for {url}: {response.status_code} {response.reason} - "
                f"{response.text}"
            )
            raise GitHubAPIError(
                url,
                response.status_code,
                response.reason,
                response.text,
                response=response,
            )

        return response.json()

    def _repo_url(self, owner: str, repo: str, path: str) -> str:
        return f"{self.base_url}/repos/{owner}/{repo}/{path}"

    def list_open_pulls(self, owner: str, repo: str) -> list[dict[str, Any]]:
        """Fetch open pull requests for a repository (first page, all authors)."""
        return self.request(self._repo_url(owner, repo, "pulls"), params={"state": "open"})

    def list_reviews(self, owner: str, repo: str, pr_number: int) -> list[dict[str, Any]]:
        """Fetch submitted and pending reviews of a PR."""
        return self.request(self._repo_url(owner, repo, f"pulls/{pr_number}/reviews"))

    def list_requested_reviewers(self, owner: str, repo: str, pr_number: int) -> dict[str, Any]:
        """Fetch users and teams still requested to review a PR.

        Returns:
            Dict with ``users`` and ``teams`` lists
        """
        return self.request(self._repo_url(owner, repo, f"pulls/{pr_number}/requested_reviewers"))

    def list_issue_comments(self, owner: str, repo: str, pr_number: int) -> list[dict[str, Any]]:
        """Fetch conversation (issue-level) comments of a PR."""
        return self.request(self._repo_url(owner, repo, f"issues/{pr_number}/comments"))

    def list_review_comments(self, owner: str, repo: str, pr_number: int) -> list[dict[str, Any]]:
        """Fetch inline review comments of a PR."""
        return self.request(self._repo_url(owner, repo, f"pulls/{pr_number}/comments"))

    def list_workflow_runs(
        self,
        owner: str,
        repo: str,
        head_sha: Optional[str] = None,
        actor: Optional[str] = None,
        per_page: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Fetch workflow runs, optionally filtered by head commit or actor.

        Args:
            owner: Repository owner (e.g., "octocat")
            repo: Repository name (e.g., "hello-world")
            head_sha: Only runs for this commit
            actor: Only runs triggered by this user
            per_page: Page size (GitHub default is 30, max 100)

        Returns:
            The ``workflow_runs`` array of the response
        """
        params = {}
        if head_sha:
            params["head_sha"] = head_sha
        if actor:
            params["actor"] = actor
        if per_page:
            params["per_page"] = per_page

        data = self.request(self._repo_url(owner, repo, "actions/runs"), params=params or None)
        return data["workflow_runs"]
