"""
FastAPI application for the PR monitor.

``create_app`` wires an explicit, already-loaded Config into the aggregator,
the workflow collector and the routes. ``build_app`` is the uvicorn factory
used by the server entry point: it loads the config from the environment
first and exits if it is invalid.
"""

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend.pages import router as pages_router
from backend.routes import router as api_router
from fetchers.github import GitHubClient
from models.config_models import Config
from monitor.aggregator import PRAggregator
from monitor.workflows import StandaloneWorkflowCollector
from utils.config_loader import load_config
from utils.logger import setup_logger

STATIC_DIR = Path(__file__).parent / "static"


def create_app(config: Config, client: Optional[GitHubClient] = None) -> FastAPI:
    """
    Build the FastAPI app for a given configuration.

    Args:
        config: Validated application configuration
        client: GitHub client to use (default: one built from the config)

    Returns:
        FastAPI: Configured application
    """
    if client is None:
        client = GitHubClient(
            config.credentials.github_token,
            base_url=config.api_url,
            timeout=config.request_timeout,
        )

    app = FastAPI(
        title="PR Monitor",
        description="Open pull requests and workflow runs for one GitHub user",
        version="1.0.0",
    )

    # Allow the API to be called from other local origins (e.g. a dev frontend)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.config = config
    app.state.aggregator = PRAggregator(client, config)
    app.state.collector = StandaloneWorkflowCollector(client, config)

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(api_router)
    app.include_router(pages_router)

    return app


def build_app() -> FastAPI:
    """Load configuration from the environment and build the app."""
    config = load_config()
    logger = setup_logger(config.log_level)
    app = create_app(config)
    logger.info(
        f"PR monitor initialized for {config.username}, "
        f"monitoring: {', '.join(config.repositories) or '(no repositories)'}"
    )
    return app
