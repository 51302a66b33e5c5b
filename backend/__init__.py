"""
PR Monitor - Web dashboard for a GitHub user's open PRs and workflow runs.

Provides a FastAPI backend that aggregates PR, review, comment and CI state
from the GitHub API, plus a small server-rendered dashboard that refreshes
itself periodically.
"""
