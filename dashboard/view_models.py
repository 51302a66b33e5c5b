"""Turn aggregated PRs and workflow runs into display-ready card view models.

Everything here is a pure transform: no I/O and no markup. The Jinja2
templates and the terminal CLI both render from these cards.
"""

from datetime import datetime, timezone
from typing import Literal, Optional, Sequence
from pydantic import BaseModel

from models.data_models import PullRequest, ReviewEntry, StandaloneWorkflowRun, WorkflowRun

DEFAULT_PALETTE_SIZE = 8
MAIN_BRANCHES = ("main", "master")

# Conclusions of completed runs; unlisted conclusions fall back to "pending" / "Completed"
_COMPLETED_ICONS = {
    "success": "success",
    "failure": "failure",
    "timed_out": "failure",
    "cancelled": "cancelled",
}
_COMPLETED_TEXT = {
    "success": "Success",
    "failure": "Failed",
    "cancelled": "Cancelled",
    "timed_out": "Timed Out",
}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_relative_time(value: datetime, now: Optional[datetime] = None) -> str:
    """Human-readable age of a timestamp.

    Under a minute reads "just now", then "Nm ago", "Nh ago" and "Nd ago"
    (floored) up to a week. Older timestamps show a short date such as
    "Mar 4", with the year added when it is not the current year.
    """
    value = _as_utc(value)
    now = _as_utc(now) if now else datetime.now(timezone.utc)

    elapsed = (now - value).total_seconds()
    minutes = int(elapsed // 60)
    hours = int(elapsed // 3600)
    days = int(elapsed // 86400)

    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"

    label = f"{value.strftime('%b')} {value.day}"
    if value.year != now.year:
        label += f", {value.year}"
    return label


def status_icon(status: Optional[str], conclusion: Optional[str]) -> str:
    """Icon class suffix for a run: in_progress, success, failure, cancelled or pending."""
    if status in ("in_progress", "queued"):
        return "in_progress"
    if status == "completed":
        return _COMPLETED_ICONS.get(conclusion, "pending")
    return "pending"


def status_text(status: Optional[str], conclusion: Optional[str]) -> str:
    """Short label for a run's state."""
    if status == "in_progress":
        return "In Progress"
    if status == "queued":
        return "Queued"
    if status == "completed":
        return _COMPLETED_TEXT.get(conclusion, "Completed")
    if not status:
        return "Unknown"
    return status[0].upper() + status[1:]


def branch_class(branch: Optional[str]) -> str:
    return "master-branch" if branch in MAIN_BRANCHES else "feature-branch"


def repo_color_class(
    repository: str,
    repositories: Sequence[str],
    palette_size: int = DEFAULT_PALETTE_SIZE,
) -> str:
    """Colour class for a repository, by its position in the configured list.

    Positions wrap around the palette; an unlisted repository gets ``repo-0``.
    """
    try:
        index = list(repositories).index(repository)
    except ValueError:
        return "repo-0"
    return f"repo-{index % palette_size + 1}"


class ReviewLine(BaseModel):
    user: str
    role: Optional[str] = None
    when: Optional[str] = None


class ReviewGroup(BaseModel):
    key: Literal["approving", "changes-requested", "pending"]
    heading: str
    icon: str
    reviews: list[ReviewLine]

    @property
    def count(self) -> int:
        return len(self.reviews)


class AwaitingReviewer(BaseModel):
    kind: Literal["user", "team"]
    handle: str
    name: Optional[str] = None  # team display name


class WorkflowChip(BaseModel):
    name: str
    url: str
    icon: str
    text: str


class PRCard(BaseModel):
    """Everything needed to draw one PR card."""
    number: int
    title: str
    url: str
    repository: str
    author: str
    created: str
    draft: bool
    title_classes: str
    head_branch: str
    head_branch_class: str
    base_branch: str
    base_branch_class: str
    review_groups: list[ReviewGroup]
    awaiting: list[AwaitingReviewer]
    workflows: list[WorkflowChip]
    last_activity: Optional[str] = None

    @property
    def awaiting_count(self) -> int:
        return len(self.awaiting)


class WorkflowCard(BaseModel):
    """Everything needed to draw one standalone workflow card."""
    name: str
    url: str
    repository: str
    created: str
    icon: str
    status_text: str
    head_branch: Optional[str] = None
    head_sha: Optional[str] = None


def _review_lines(reviews: list[ReviewEntry], now: Optional[datetime]) -> list[ReviewLine]:
    return [
        ReviewLine(
            user=review.user,
            role=review.author_association,
            when=format_relative_time(review.submitted_at, now) if review.submitted_at else None,
        )
        for review in reviews
    ]


def _workflow_chip(run: WorkflowRun) -> WorkflowChip:
    return WorkflowChip(
        name=run.name or f"Run {run.id}",
        url=run.html_url,
        icon=status_icon(run.status, run.conclusion),
        text=status_text(run.status, run.conclusion),
    )


def build_pr_card(
    pr: PullRequest,
    repositories: Sequence[str],
    now: Optional[datetime] = None,
    palette_size: int = DEFAULT_PALETTE_SIZE,
) -> PRCard:
    """View model for one PR."""
    reviews = pr.reviews

    # Approved is always shown (even at zero); the others only when non-empty
    review_groups = [
        ReviewGroup(key="approving", heading="Approved", icon="✅",
                    reviews=_review_lines(reviews.approving, now)),
    ]
    if reviews.changes_requested:
        review_groups.append(
            ReviewGroup(key="changes-requested", heading="Changes Requested", icon="❌",
                        reviews=_review_lines(reviews.changes_requested, now))
        )
    if reviews.pending:
        review_groups.append(
            ReviewGroup(key="pending", heading="Pending", icon="⏳",
                        reviews=_review_lines(reviews.pending, now))
        )

    awaiting = [AwaitingReviewer(kind="user", handle=r.user) for r in reviews.requested_users]
    awaiting += [
        AwaitingReviewer(kind="team", handle=t.team, name=t.name)
        for t in reviews.requested_teams
    ]

    title_classes = ["pr-title", repo_color_class(pr.repository, repositories, palette_size)]
    if pr.draft:
        title_classes.append("draft")

    return PRCard(
        number=pr.number,
        title=pr.title,
        url=pr.html_url,
        repository=pr.repository,
        author=pr.author,
        created=format_relative_time(pr.created_at, now),
        draft=pr.draft,
        title_classes=" ".join(title_classes),
        head_branch=pr.head_branch,
        head_branch_class=branch_class(pr.head_branch),
        base_branch=pr.base_branch,
        base_branch_class=branch_class(pr.base_branch),
        review_groups=review_groups,
        awaiting=awaiting,
        workflows=[_workflow_chip(run) for run in pr.workflows],
        last_activity=format_relative_time(pr.latest_comment, now) if pr.latest_comment else None,
    )


def build_pr_cards(
    prs: Sequence[PullRequest],
    repositories: Sequence[str],
    now: Optional[datetime] = None,
    palette_size: int = DEFAULT_PALETTE_SIZE,
) -> list[PRCard]:
    return [build_pr_card(pr, repositories, now, palette_size) for pr in prs]


def build_workflow_card(run: StandaloneWorkflowRun, now: Optional[datetime] = None) -> WorkflowCard:
    """View model for one standalone workflow run."""
    return WorkflowCard(
        name=run.name or f"Run {run.id}",
        url=run.html_url,
        repository=run.repository,
        created=format_relative_time(run.created_at, now),
        icon=status_icon(run.status, run.conclusion),
        status_text=status_text(run.status, run.conclusion),
        head_branch=run.head_branch,
        head_sha=run.head_sha,
    )


def build_workflow_cards(
    runs: Sequence[StandaloneWorkflowRun],
    now: Optional[datetime] = None,
) -> list[WorkflowCard]:
    return [build_workflow_card(run, now) for run in runs]
