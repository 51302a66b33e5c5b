"""Collect the configured user's recent workflow runs that are not part of a PR."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from fetchers.github import FETCH_ERRORS, GitHubClient
from models.config_models import Config
from models.data_models import StandaloneWorkflowRun
from monitor.common import parse_timestamp, split_repository

logger = logging.getLogger(__name__)

# Synthetic ref namespace GitHub uses for runs triggered by pull requests
PULL_REQUEST_REF_PREFIX = "refs/pull/"

SHORT_SHA_LENGTH = 7


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def is_standalone_run(run: dict[str, Any], cutoff: datetime) -> bool:
    """Whether a raw run belongs in the standalone list.

    A run qualifies when it was created at or after ``cutoff``, its head
    branch is not a pull request ref, and GitHub associates it with no PR.
    """
    if parse_timestamp(run["created_at"]) < cutoff:
        return False

    head_branch = run.get("head_branch")
    if head_branch and head_branch.startswith(PULL_REQUEST_REF_PREFIX):
        return False

    return not run.get("pull_requests")


def to_standalone_run(repository: str, run: dict[str, Any]) -> StandaloneWorkflowRun:
    """Map a raw run payload to a StandaloneWorkflowRun."""
    head_sha = run.get("head_sha")
    return StandaloneWorkflowRun(
        id=run["id"],
        name=run.get("name"),
        repository=repository,
        status=run.get("status"),
        conclusion=run.get("conclusion"),
        created_at=run["created_at"],
        updated_at=run.get("updated_at"),
        html_url=run["html_url"],
        head_branch=run.get("head_branch"),
        head_sha=head_sha[:SHORT_SHA_LENGTH] if head_sha else None,
    )


class StandaloneWorkflowCollector:
    """Recent runs triggered by the configured user outside of any PR."""

    def __init__(
        self,
        client: GitHubClient,
        config: Config,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            client: GitHub API client
            config: Application configuration (user, repositories, limits)
            clock: Returns the current aware datetime (default: UTC now)
        """
        self.client = client
        self.username = config.username
        self.repositories = config.repositories
        self.lookback = timedelta(days=config.standalone_lookback_days)
        self.run_limit = config.standalone_run_limit
        self.clock = clock or utc_now

    def list_repository_runs(self, repository: str, cutoff: datetime) -> list[StandaloneWorkflowRun]:
        """Standalone runs for one repository.

        Raises:
            requests.RequestException: If the run listing fails
            ValueError: If the repository identifier is malformed
        """
        owner, repo = split_repository(repository)
        runs = self.client.list_workflow_runs(
            owner, repo, actor=self.username, per_page=self.run_limit
        )
        standalone = [
            to_standalone_run(repository, run)
            for run in runs
            if is_standalone_run(run, cutoff)
        ]
        logger.info(f"{repository}: {len(standalone)} of {len(runs)} recent runs are standalone")
        return standalone

    def list_standalone_runs(self) -> list[StandaloneWorkflowRun]:
        """Standalone runs across all repositories, newest first."""
        cutoff = self.clock() - self.lookback
        all_runs: list[StandaloneWorkflowRun] = []

        for repository in self.repositories:
            try:
                all_runs.extend(self.list_repository_runs(repository, cutoff))
            except FETCH_ERRORS as e:
                logger.error(f"Error fetching workflows for {repository}: {e}")

        return sorted(all_runs, key=lambda run: run.created_at, reverse=True)
