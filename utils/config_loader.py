"""Configuration loader that reads from .env and validates with Pydantic."""

import os
import sys
from pathlib import Path
from dotenv import load_dotenv
from pydantic import ValidationError

from models.config_models import Config, CredentialsConfig


def parse_repositories(raw: str) -> tuple[str, ...]:
    """Split a comma-separated REPOSITORIES value into owner/name entries."""
    return tuple(repo.strip() for repo in raw.split(",") if repo.strip())


def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Reads from .env file in the project root and validates the GitHub
    credentials, the monitored user and repositories, and the dashboard
    settings using Pydantic models.

    Returns:
        Config: Validated, immutable configuration object

    Raises:
        SystemExit: If configuration is invalid or missing required fields
    """
    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    # Optional settings only override the model defaults when present
    optional = {
        "port": os.getenv("PORT"),
        "api_url": os.getenv("GITHUB_API_URL"),
        "request_timeout": os.getenv("REQUEST_TIMEOUT"),
        "standalone_lookback_days": os.getenv("STANDALONE_LOOKBACK_DAYS"),
        "standalone_run_limit": os.getenv("STANDALONE_RUN_LIMIT"),
        "repo_palette_size": os.getenv("REPO_PALETTE_SIZE"),
        "refresh_interval_seconds": os.getenv("REFRESH_INTERVAL_SECONDS"),
    }
    overrides = {key: value for key, value in optional.items() if value}

    try:
        config = Config(
            credentials=CredentialsConfig(
                github_token=os.getenv("GITHUB_TOKEN", ""),
            ),
            username=os.getenv("GITHUB_USERNAME", ""),
            repositories=parse_repositories(os.getenv("REPOSITORIES", "")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            **overrides,
        )

        return config

    except ValidationError as e:
        print("❌ Configuration validation failed:", file=sys.stderr)
        print("\nPlease check your .env file. Missing or invalid fields:", file=sys.stderr)

        for error in e.errors():
            field_path = " → ".join(str(x) for x in error["loc"])
            message = error["msg"]
            print(f"  • {field_path}: {message}", file=sys.stderr)

        print("\nHint: Copy .env.example to .env and set GITHUB_TOKEN and GITHUB_USERNAME.", file=sys.stderr)
        sys.exit(1)
