"""Configuration models for validation using Pydantic."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class CredentialsConfig(BaseModel):
    """API credentials loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    github_token: str = Field(..., min_length=1, description="GitHub personal access token (classic or fine-grained)")

    @field_validator("github_token")
    @classmethod
    def validate_github_token(cls, v: str) -> str:
        """Validate GitHub token is set."""
        if not v or v in ("ghp_your_token_here", "your_github_token_here"):
            raise ValueError("GitHub token must be set in .env file")
        return v


class Config(BaseModel):
    """Application configuration.

    Loaded once at startup and passed explicitly to the aggregator,
    the workflow collector and the web app. Frozen for the process lifetime.
    """

    model_config = ConfigDict(frozen=True)

    credentials: CredentialsConfig
    username: str = Field(..., min_length=1, description="GitHub user whose PRs and runs are monitored")
    repositories: tuple[str, ...] = Field(default=(), description="Repositories to monitor, as owner/name")
    port: int = Field(default=3000, ge=1, le=65535, description="Port the dashboard listens on")
    log_level: str = Field(default="INFO", description="Logging level")

    api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    request_timeout: Optional[float] = Field(default=None, gt=0, description="Per-request timeout in seconds (unset = wait forever)")

    # Dashboard constants
    standalone_lookback_days: int = Field(default=3, ge=0, description="Standalone runs older than this are hidden")
    standalone_run_limit: int = Field(default=50, ge=1, le=100, description="Runs fetched per repository for the standalone list")
    repo_palette_size: int = Field(default=8, ge=1, description="Number of repository colours before wrapping")
    refresh_interval_seconds: int = Field(default=300, ge=10, description="Dashboard auto-refresh interval")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Validate GitHub username is set."""
        v = v.strip()
        if not v or v == "your_github_username":
            raise ValueError("GitHub username must be set in .env file")
        return v

    @field_validator("repositories")
    @classmethod
    def validate_repositories(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate every repository is in owner/name form."""
        for repo in v:
            owner, _, name = repo.partition("/")
            if not owner or not name or "/" in name:
                raise ValueError(f"Repository must be in owner/name format: '{repo}'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v_upper
