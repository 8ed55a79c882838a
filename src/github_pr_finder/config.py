"""Configuration settings for GitHub PR Finder."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GitHubConfig(BaseModel):
    """Configuration for GitHub API access."""

    user_agent: str = Field(
        default="github-pr-finder",
        min_length=1,
        description="User-Agent header sent with every GitHub request",
    )
    per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Page size for paginated list endpoints",
    )


class SyncConfig(BaseModel):
    """Configuration for PR sync behavior.

    Controls which diffs are fetched and how implicitly discovered
    authors are registered as members.
    """

    diff_max_changes: int = Field(
        default=2000,
        ge=0,
        description="Skip diff fetch when additions + deletions exceed this value",
    )
    default_display_name_to_username: bool = Field(
        default=True,
        description="Use the GitHub login as display name for members created by sync",
    )
    fetch_pr_stats: bool = Field(
        default=True,
        description=(
            "Fetch each PR's details to get additions/deletions "
            "(the list endpoint does not include them)"
        ),
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # Database
    # --------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite+aiosqlite:///./github_pr_finder.db",
        description="Async SQLite database connection string",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="Fallback GitHub personal access token (stored token wins)",
    )
    github: GitHubConfig = Field(
        default_factory=GitHubConfig,
        description="GitHub client configuration",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Sync Configuration
    # --------------------------------------------------------------------------
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="PR sync behavior configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
