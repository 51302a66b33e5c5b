"""Data models for the PR monitor."""

from models.config_models import Config, CredentialsConfig
from models.data_models import (
    PullRequest,
    RequestedTeam,
    RequestedUser,
    ReviewEntry,
    ReviewSummary,
    StandaloneWorkflowRun,
    WorkflowRun,
)

__all__ = [
    "Config",
    "CredentialsConfig",
    "PullRequest",
    "RequestedTeam",
    "RequestedUser",
    "ReviewEntry",
    "ReviewSummary",
    "StandaloneWorkflowRun",
    "WorkflowRun",
]
