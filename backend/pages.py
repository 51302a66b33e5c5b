"""
HTML routes for the dashboard.

The page itself is a shell; the browser script pulls the two card panels
from the fragment endpoints, which render the view models server-side.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from dashboard.view_models import build_pr_cards, build_workflow_cards

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["dashboard"])


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    """Serve the dashboard page."""
    config = request.app.state.config
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "username": config.username,
            "repositories": config.repositories,
            "refresh_interval_ms": config.refresh_interval_seconds * 1000,
        },
    )


@router.get("/fragments/prs", response_class=HTMLResponse)
def pr_cards(request: Request):
    """Render the PR panel."""
    config = request.app.state.config
    try:
        prs = request.app.state.aggregator.list_user_prs()
    except Exception as e:
        logger.error(f"Error fetching PRs: {e}", exc_info=True)
        return templates.TemplateResponse(
            request, "_error.html", {"message": "Failed to fetch PRs"}, status_code=500
        )

    cards = build_pr_cards(prs, config.repositories, palette_size=config.repo_palette_size)
    return templates.TemplateResponse(request, "_pr_cards.html", {"cards": cards})


@router.get("/fragments/workflows", response_class=HTMLResponse)
def workflow_cards(request: Request):
    """Render the standalone workflow panel."""
    try:
        runs = request.app.state.collector.list_standalone_runs()
    except Exception as e:
        logger.error(f"Error fetching workflows: {e}", exc_info=True)
        return templates.TemplateResponse(
            request, "_error.html", {"message": "Failed to fetch workflows"}, status_code=500
        )

    cards = build_workflow_cards(runs)
    return templates.TemplateResponse(request, "_workflow_cards.html", {"cards": cards})
