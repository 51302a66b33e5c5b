"""Aggregate the configured user's open PRs across repositories.

For every monitored repository the open PRs are listed and filtered to the
configured author. Each surviving PR is then enriched with three independent
lookups (reviews, latest comment, workflow runs) that run in parallel and are
joined before moving on to the next PR. Repositories and PRs are otherwise
processed one at a time.

Failures are isolated per unit: a failed lookup for one PR degrades to an
empty value for that PR, and a failed PR listing drops only that repository.
"""

import logging
from datetime import datetime
from functools import partial
from typing import Any, Optional

from fetchers.github import FETCH_ERRORS, GitHubClient
from models.config_models import Config
from models.data_models import (
    PullRequest,
    RequestedTeam,
    RequestedUser,
    ReviewEntry,
    ReviewSummary,
    WorkflowRun,
)
from monitor.common import parse_timestamp, run_concurrently, split_repository

logger = logging.getLogger(__name__)

# Review states kept in the summary; anything else (COMMENTED, DISMISSED) is dropped
REVIEW_STATE_FIELDS = {
    "APPROVED": "approving",
    "CHANGES_REQUESTED": "changes_requested",
    "PENDING": "pending",
}


def classify_reviews(
    reviews: list[dict[str, Any]],
    requested_reviewers: dict[str, Any],
) -> ReviewSummary:
    """Build a ReviewSummary from raw review and requested-reviewer payloads.

    Only each reviewer's latest APPROVED / CHANGES_REQUESTED / PENDING review
    counts (the endpoint lists reviews oldest first). Reviewers who are
    currently re-requested are reported as outstanding only, so every user
    ends up in at most one list.

    Args:
        reviews: Response of the PR reviews endpoint
        requested_reviewers: Response of the requested_reviewers endpoint
            (``{"users": [...], "teams": [...]}``)

    Returns:
        ReviewSummary with reviews partitioned by state and the outstanding
        users and teams

    Raises:
        ValueError: If either payload has an unexpected shape
    """
    if not isinstance(reviews, list):
        raise ValueError(f"Expected a list of reviews, got {type(reviews).__name__}")
    if not isinstance(requested_reviewers, dict):
        raise ValueError(
            f"Expected a requested_reviewers object, got {type(requested_reviewers).__name__}"
        )

    requested_users = [
        RequestedUser(user=user["login"])
        for user in requested_reviewers.get("users") or []
    ]
    requested_teams = [
        RequestedTeam(team=team["slug"], name=team.get("name") or team["slug"])
        for team in requested_reviewers.get("teams") or []
    ]
    outstanding = {user.user for user in requested_users}

    # login -> (field, entry); a later review replaces and moves to the end
    latest: dict[str, tuple[str, ReviewEntry]] = {}
    for review in reviews:
        field = REVIEW_STATE_FIELDS.get(review.get("state"))
        if field is None:
            continue
        login = review["user"]["login"]
        latest.pop(login, None)
        latest[login] = (
            field,
            ReviewEntry(
                user=login,
                submitted_at=review.get("submitted_at"),
                author_association=review.get("author_association"),
            ),
        )

    grouped: dict[str, list[ReviewEntry]] = {field: [] for field in REVIEW_STATE_FIELDS.values()}
    for login, (field, entry) in latest.items():
        if login not in outstanding:
            grouped[field].append(entry)

    return ReviewSummary(
        **grouped,
        requested_users=requested_users,
        requested_teams=requested_teams,
    )


def to_workflow_run(run: dict[str, Any]) -> WorkflowRun:
    """Map a raw workflow run payload to a WorkflowRun."""
    return WorkflowRun(
        id=run["id"],
        name=run.get("name"),
        status=run.get("status"),
        conclusion=run.get("conclusion"),
        created_at=run["created_at"],
        updated_at=run.get("updated_at"),
        html_url=run["html_url"],
    )


class PRAggregator:
    """Collect open PRs authored by the configured user, with review/CI state."""

    def __init__(self, client: GitHubClient, config: Config):
        self.client = client
        self.username = config.username
        self.repositories = config.repositories

    def get_pr_reviews(self, owner: str, repo: str, pr_number: int) -> ReviewSummary:
        """Fetch and classify reviews of a PR.

        Reviews and requested reviewers are fetched in parallel. On any
        failure an empty ReviewSummary is returned instead of raising.
        """
        try:
            reviews, requested_reviewers = run_concurrently(
                partial(self.client.list_reviews, owner, repo, pr_number),
                partial(self.client.list_requested_reviewers, owner, repo, pr_number),
            )
            summary = classify_reviews(reviews, requested_reviewers)
        except FETCH_ERRORS as e:
            logger.error(f"Error fetching reviews for PR {owner}/{repo}#{pr_number}: {e}")
            return ReviewSummary()

        logger.debug(
            f"PR {owner}/{repo}#{pr_number}: "
            f"{len(summary.approving)} approved, "
            f"{len(summary.changes_requested)} changes requested, "
            f"{len(summary.requested_users) + len(summary.requested_teams)} awaiting"
        )
        return summary

    def get_latest_comment(self, owner: str, repo: str, pr_number: int) -> Optional[datetime]:
        """Return the creation time of the newest comment on a PR.

        Conversation and inline review comments are considered together.
        Returns None when there are no comments or the fetch fails.
        """
        try:
            issue_comments, review_comments = run_concurrently(
                partial(self.client.list_issue_comments, owner, repo, pr_number),
                partial(self.client.list_review_comments, owner, repo, pr_number),
            )
            timestamps = [
                parse_timestamp(comment["created_at"])
                for comment in [*issue_comments, *review_comments]
            ]
        except FETCH_ERRORS as e:
            logger.error(f"Error fetching comments for PR {owner}/{repo}#{pr_number}: {e}")
            return None

        return max(timestamps) if timestamps else None

    def get_pr_workflows(self, owner: str, repo: str, pr_number: int, head_sha: str) -> list[WorkflowRun]:
        """Fetch workflow runs for a PR's head commit ([] on failure)."""
        try:
            runs = self.client.list_workflow_runs(owner, repo, head_sha=head_sha)
            return [to_workflow_run(run) for run in runs]
        except FETCH_ERRORS as e:
            logger.error(f"Error fetching workflows for PR {owner}/{repo}#{pr_number}: {e}")
            return []

    def build_pull_request(self, repository: str, pr: dict[str, Any]) -> PullRequest:
        """Enrich one raw PR with reviews, latest comment and workflow runs."""
        owner, repo = split_repository(repository)
        number = pr["number"]

        reviews, latest_comment, workflows = run_concurrently(
            partial(self.get_pr_reviews, owner, repo, number),
            partial(self.get_latest_comment, owner, repo, number),
            partial(self.get_pr_workflows, owner, repo, number, pr["head"]["sha"]),
        )

        return PullRequest(
            id=pr["id"],
            number=number,
            title=pr["title"],
            repository=repository,
            html_url=pr["html_url"],
            head_branch=pr["head"]["ref"],
            base_branch=pr["base"]["ref"],
            created_at=pr["created_at"],
            updated_at=pr["updated_at"],
            author=pr["user"]["login"],
            draft=bool(pr.get("draft")),
            mergeable=pr.get("mergeable"),
            reviews=reviews,
            latest_comment=latest_comment,
            workflows=workflows,
        )

    def list_repository_prs(self, repository: str) -> list[PullRequest]:
        """Open PRs by the configured user in one repository.

        Raises:
            requests.RequestException: If the PR listing fails
            ValueError: If the repository identifier is malformed
        """
        owner, repo = split_repository(repository)
        prs = self.client.list_open_pulls(owner, repo)
        user_prs = [pr for pr in prs if pr["user"]["login"] == self.username]

        logger.info(f"{repository}: {len(user_prs)} of {len(prs)} open PRs by {self.username}")

        return [self.build_pull_request(repository, pr) for pr in user_prs]

    def list_user_prs(self) -> list[PullRequest]:
        """Open PRs by the configured user across all repositories.

        Returns:
            PRs sorted by creation time, newest first. PRs created at the
            same instant keep repository-list order.
        """
        all_prs: list[PullRequest] = []

        for repository in self.repositories:
            try:
                all_prs.extend(self.list_repository_prs(repository))
            except FETCH_ERRORS as e:
                logger.error(f"Error fetching PRs for {repository}: {e}")

        # sorted() is stable, also with reverse=True
        return sorted(all_prs, key=lambda pr: pr.created_at, reverse=True)
