"""Pytest configuration for integration tests."""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

LIVE_REQUIRED_VARS = ["REPO", "GITHUB_PAT_TOKEN"]


@pytest.fixture(autouse=True, scope="session")
def load_env() -> None:
    """Load environment variables from .env file before running integration tests.

    It loads environment variables from:
    1. .env.integration (if it exists)
    2. .env (if it exists)

    The .env.integration file takes precedence over .env.
    """
    # Get the project root directory (3 levels up from this file)
    project_root = Path(__file__).parent.parent.parent

    integration_env = project_root / ".env.integration"
    if integration_env.exists():
        load_dotenv(dotenv_path=integration_env)

    default_env = project_root / ".env"
    if default_env.exists():
        load_dotenv(dotenv_path=default_env)


@pytest.fixture
def live_repo(load_env: None) -> str:
    """The template repository used by tests that talk to GitHub, skipping when it is not configured."""
    missing_vars = [var for var in LIVE_REQUIRED_VARS if not os.getenv(var)]
    if missing_vars:
        pytest.skip(f"Missing environment variables for live tests: {', '.join(missing_vars)}")
    return os.environ["REPO"]
