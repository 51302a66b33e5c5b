"""Tests for dashboard view models."""

from datetime import datetime, timedelta, timezone

import pytest

from dashboard.view_models import (
    branch_class,
    build_pr_card,
    build_workflow_card,
    format_relative_time,
    repo_color_class,
    status_icon,
    status_text,
)
from models.data_models import (
    PullRequest,
    RequestedTeam,
    RequestedUser,
    ReviewEntry,
    ReviewSummary,
    StandaloneWorkflowRun,
    WorkflowRun,
)

NOW = datetime(2025, 6, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_pull_request(**overrides):
    fields = {
        "id": 1,
        "number": 42,
        "title": "Add caching",
        "repository": "octocat/beta",
        "html_url": "https://github.com/octocat/beta/pull/42",
        "head_branch": "feature/cache",
        "base_branch": "main",
        "created_at": NOW - timedelta(hours=3),
        "updated_at": NOW - timedelta(hours=1),
        "author": "octocat",
    }
    fields.update(overrides)
    return PullRequest(**fields)


class TestFormatRelativeTime:

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=1), "1m ago"),
        (timedelta(minutes=59, seconds=59), "59m ago"),
        (timedelta(hours=1), "1h ago"),
        (timedelta(hours=23, minutes=59), "23h ago"),
        (timedelta(days=1), "1d ago"),
        (timedelta(days=6, hours=23), "6d ago"),
    ])
    def test_relative_buckets(self, delta, expected):
        assert format_relative_time(NOW - delta, NOW) == expected

    def test_week_or_older_same_year_shows_date(self):
        assert format_relative_time(datetime(2025, 3, 4, tzinfo=timezone.utc), NOW) == "Mar 4"

    def test_previous_year_includes_year(self):
        assert format_relative_time(datetime(2024, 12, 25, tzinfo=timezone.utc), NOW) == "Dec 25, 2024"

    def test_future_timestamp_reads_just_now(self):
        assert format_relative_time(NOW + timedelta(minutes=5), NOW) == "just now"

    def test_naive_datetime_treated_as_utc(self):
        assert format_relative_time(datetime(2025, 6, 10, 11, 0), NOW) == "1h ago"


class TestStatus:

    @pytest.mark.parametrize("status, conclusion, icon, text", [
        ("queued", None, "in_progress", "Queued"),
        ("in_progress", None, "in_progress", "In Progress"),
        ("completed", "success", "success", "Success"),
        ("completed", "failure", "failure", "Failed"),
        ("completed", "timed_out", "failure", "Timed Out"),
        ("completed", "cancelled", "cancelled", "Cancelled"),
        ("completed", "skipped", "pending", "Completed"),
        ("waiting", None, "pending", "Waiting"),
    ])
    def test_mapping(self, status, conclusion, icon, text):
        assert status_icon(status, conclusion) == icon
        assert status_text(status, conclusion) == text


class TestClasses:

    @pytest.mark.parametrize("branch, expected", [
        ("main", "master-branch"),
        ("master", "master-branch"),
        ("develop", "feature-branch"),
        ("feature/main", "feature-branch"),
    ])
    def test_branch_class(self, branch, expected):
        assert branch_class(branch) == expected

    def test_repo_color_by_position(self):
        repos = ["a/one", "a/two", "a/three"]
        assert repo_color_class("a/one", repos) == "repo-1"
        assert repo_color_class("a/three", repos) == "repo-3"

    def test_repo_color_wraps_around_palette(self):
        repos = [f"a/repo{i}" for i in range(10)]
        assert repo_color_class("a/repo7", repos) == "repo-8"
        assert repo_color_class("a/repo8", repos) == "repo-1"
        assert repo_color_class("a/repo9", repos, palette_size=4) == "repo-2"

    def test_unknown_repository(self):
        assert repo_color_class("x/y", ["a/b"]) == "repo-0"


class TestPRCard:

    def test_basic_card(self):
        card = build_pr_card(make_pull_request(), ["octocat/alpha", "octocat/beta"], NOW)

        assert card.number == 42
        assert card.title_classes == "pr-title repo-2"
        assert card.created == "3h ago"
        assert card.head_branch_class == "feature-branch"
        assert card.base_branch_class == "master-branch"
        assert card.workflows == []
        assert card.last_activity is None

    def test_draft(self):
        card = build_pr_card(make_pull_request(draft=True), ["octocat/beta"], NOW)

        assert card.draft is True
        assert card.title_classes == "pr-title repo-1 draft"

    def test_review_groups(self):
        reviews = ReviewSummary(
            approving=[ReviewEntry(user="alice", submitted_at=NOW - timedelta(days=2),
                                   author_association="MEMBER")],
            requested_users=[RequestedUser(user="bob")],
            requested_teams=[RequestedTeam(team="core", name="Core Team")],
        )
        card = build_pr_card(make_pull_request(reviews=reviews), ["octocat/beta"], NOW)

        # Approved is always present; empty changes-requested/pending are omitted
        assert [group.key for group in card.review_groups] == ["approving"]
        approved = card.review_groups[0]
        assert approved.count == 1
        assert approved.reviews[0].user == "alice"
        assert approved.reviews[0].role == "MEMBER"
        assert approved.reviews[0].when == "2d ago"

        assert card.awaiting_count == 2
        assert [(r.kind, r.handle, r.name) for r in card.awaiting] == [
            ("user", "bob", None),
            ("team", "core", "Core Team"),
        ]

    def test_changes_requested_and_pending_shown_when_present(self):
        reviews = ReviewSummary(
            changes_requested=[ReviewEntry(user="carol", submitted_at=NOW)],
            pending=[ReviewEntry(user="dave")],
        )
        card = build_pr_card(make_pull_request(reviews=reviews), [], NOW)

        assert [group.key for group in card.review_groups] == ["approving", "changes-requested", "pending"]
        assert card.review_groups[0].count == 0
        assert card.review_groups[2].reviews[0].when is None

    def test_workflows_and_last_activity(self):
        pr = make_pull_request(
            workflows=[WorkflowRun(id=5, name="CI", status="completed", conclusion="failure",
                                   created_at=NOW, html_url="https://github.com/run/5")],
            latest_comment=NOW - timedelta(minutes=10),
        )
        card = build_pr_card(pr, [], NOW)

        assert card.workflows[0].name == "CI"
        assert card.workflows[0].icon == "failure"
        assert card.last_activity == "10m ago"


class TestWorkflowCard:

    def test_card(self):
        run = StandaloneWorkflowRun(
            id=9,
            name="Deploy",
            repository="octocat/alpha",
            status="in_progress",
            created_at=NOW - timedelta(minutes=30),
            html_url="https://github.com/run/9",
            head_branch="main",
            head_sha="abc1234",
        )
        card = build_workflow_card(run, NOW)

        assert card.name == "Deploy"
        assert card.icon == "in_progress"
        assert card.status_text == "In Progress"
        assert card.created == "30m ago"
        assert card.head_sha == "abc1234"
