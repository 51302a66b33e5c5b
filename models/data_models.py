"""Data models for pull requests, reviews and workflow runs."""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field


class ReviewEntry(BaseModel):
    """A submitted review from one reviewer."""
    user: str
    submitted_at: Optional[datetime] = None  # PENDING reviews have no submission time
    author_association: Optional[str] = None  # e.g. "COLLABORATOR", "CONTRIBUTOR"


class RequestedUser(BaseModel):
    """A user asked to review who has not reviewed yet."""
    user: str
    type: Literal["user"] = "user"


class RequestedTeam(BaseModel):
    """A team asked to review who has not reviewed yet."""
    team: str  # team slug
    name: str
    type: Literal["team"] = "team"


class ReviewSummary(BaseModel):
    """Current review state of a PR.

    The three review lists come from the PR's review list, partitioned by
    state. The two requested lists are the live requested-reviewers snapshot,
    i.e. who is still outstanding right now.
    """
    approving: list[ReviewEntry] = Field(default_factory=list)
    changes_requested: list[ReviewEntry] = Field(default_factory=list)
    pending: list[ReviewEntry] = Field(default_factory=list)
    requested_users: list[RequestedUser] = Field(default_factory=list)
    requested_teams: list[RequestedTeam] = Field(default_factory=list)


class WorkflowRun(BaseModel):
    """One execution of a GitHub Actions workflow."""
    id: int
    name: Optional[str] = None
    status: Optional[str] = None  # queued, in_progress, completed, ...
    conclusion: Optional[str] = None  # only meaningful when status == "completed"
    created_at: datetime
    updated_at: Optional[datetime] = None
    html_url: str


class StandaloneWorkflowRun(WorkflowRun):
    """A workflow run not tied to any pull request."""
    repository: str  # e.g. "octocat/hello-world"
    head_branch: Optional[str] = None
    head_sha: Optional[str] = None  # 7-character prefix


class PullRequest(BaseModel):
    """Aggregated view of one open PR.

    Rebuilt from the API on every refresh and never persisted.
    """
    id: int
    number: int
    title: str
    repository: str  # e.g. "octocat/hello-world"
    html_url: str
    head_branch: str
    base_branch: str
    created_at: datetime
    updated_at: datetime
    author: str
    draft: bool = False
    mergeable: Optional[bool] = None  # None until GitHub has computed it

    reviews: ReviewSummary = Field(default_factory=ReviewSummary)
    latest_comment: Optional[datetime] = None
    workflows: list[WorkflowRun] = Field(default_factory=list)
