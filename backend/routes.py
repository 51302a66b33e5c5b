"""
JSON API routes for the PR monitor.

Each request runs a fresh aggregation cycle against GitHub; nothing is cached.
Per-repository and per-PR failures are already absorbed by the aggregator and
collector, so anything reaching these handlers is unexpected and becomes a
generic 500.
"""

import logging
from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from models.data_models import PullRequest, StandaloneWorkflowRun

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["monitor"])


class ConfigResponse(BaseModel):
    """Response model for the config endpoint."""
    username: str
    repositories: List[str]


@router.get("/prs", response_model=List[PullRequest])
def list_prs(request: Request):
    """
    List open PRs authored by the configured user across all repositories.

    Each PR carries its review summary, latest comment time and the workflow
    runs of its head commit. Sorted by creation time, newest first.

    Returns:
    - List of PR objects
    - {"error": ...} with status 500 on unexpected failure
    """
    try:
        prs = request.app.state.aggregator.list_user_prs()
        logger.info(f"Listed {len(prs)} open PRs")
        return prs
    except Exception as e:
        logger.error(f"Error fetching PRs: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to fetch PRs"})


@router.get("/workflows", response_model=List[StandaloneWorkflowRun])
def list_workflows(request: Request):
    """
    List the configured user's recent workflow runs that are not tied to a PR.

    Returns:
    - List of workflow runs, newest first
    - {"error": ...} with status 500 on unexpected failure
    """
    try:
        runs = request.app.state.collector.list_standalone_runs()
        logger.info(f"Listed {len(runs)} standalone workflow runs")
        return runs
    except Exception as e:
        logger.error(f"Error fetching workflows: {e}", exc_info=True)
        return JSONResponse(status_code=500, content={"error": "Failed to fetch workflows"})


@router.get("/config", response_model=ConfigResponse)
def get_config(request: Request):
    """Return the monitored username and repositories."""
    config = request.app.state.config
    return ConfigResponse(username=config.username, repositories=list(config.repositories))
