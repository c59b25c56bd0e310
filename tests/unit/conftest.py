"""Fixtures for unit tests."""

from pathlib import Path
from typing import Generator

import pytest
import structlog

from email_vcs.configuration.models import GitHubAuthenticationType, SyncConfig


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def sync_config() -> SyncConfig:
    """A complete sync configuration for the example template repository."""
    return SyncConfig(
        debug=False,
        repo="example/email-templates",
        sync_branch="master",
        webhook_secret="s3cret",
        github_api_url="https://api.github.com",
        github_authentication_type=GitHubAuthenticationType.PAT,
        github_pat_token="test-token",
        github_app_id=None,
        github_app_private_key_path=None,
        github_app_installation_id=None,
        mandrill_api_key="mandrill-key",
        mandrill_api_url="https://mandrillapp.com/api/1.0",
        default_from_email="noreply@example.com",
        default_from_name="Example",
        notify_emails=["ops@example.com", "dev@example.com"],
        local_template_dir_path=Path("templates"),
    )
