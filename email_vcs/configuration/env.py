"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"
    REPO: str | None = None
    GITHUB_SYNC_BRANCH: str = "master"
    GITHUB_WEBHOOK_SECRET: str | None = None

    # GitHub PAT settings
    GITHUB_PAT_TOKEN: str | None = None

    # GitHub App settings
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None

    # Mandrill settings
    MANDRILL_API_KEY: str | None = None
    MANDRILL_API_URL: str = "https://mandrillapp.com/api/1.0"
    MANDRILL_DEFAULT_FROM_EMAIL: str | None = None
    MANDRILL_DEFAULT_FROM_NAME: str | None = None

    # Comma separated recipients of the sync notification
    NOTIFY_EMAILS: str | None = None

    # Destination of templates imported from Mandrill
    LOCAL_TEMPLATE_DIR_PATH: Path = Path("templates")
