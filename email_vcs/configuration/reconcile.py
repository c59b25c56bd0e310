"""Reconciles application settings into a validated sync configuration."""

from pathlib import Path

from email_vcs.configuration.env import Settings
from email_vcs.configuration.exceptions import GitHubAuthenticationConfigurationUndefinedError, RequiredConfigurationElementError
from email_vcs.configuration.models import GitHubAuthenticationType, ImportConfig, SyncConfig


async def validate_github_authentication_configuration(
    github_pat_token: str | None,
    github_app_id: int | None,
    github_app_private_key_path: Path | None,
    github_app_installation_id: int | None,
) -> GitHubAuthenticationType:
    """Validates the GitHub authentication configuration.

    Args:
        github_pat_token (str | None): The GitHub PAT token.
        github_app_id (int | None): The GitHub App ID.
        github_app_private_key_path (Path | None): The path to the GitHub App private key.
        github_app_installation_id (int | None): The GitHub App installation ID.

    Raises:
        GitHubAuthenticationConfigurationUndefinedError: If both or neither of the PAT and App configurations are defined,
            or if the App configuration is incomplete.

    Returns:
        GitHubAuthenticationType: The type of GitHub authentication used.
    """
    app_settings = {
        "GitHub App ID (environment variable GITHUB_APP_ID)": github_app_id,
        "GitHub App private key path (environment variable GITHUB_APP_PRIVATE_KEY_PATH)": github_app_private_key_path,
        "GitHub App installation ID (environment variable GITHUB_APP_INSTALLATION_ID)": github_app_installation_id,
    }
    any_app_setting = any(app_settings.values())

    if github_pat_token and any_app_setting:
        raise GitHubAuthenticationConfigurationUndefinedError("Both PAT and GitHub App configurations are defined. Please use one or the other.")

    if github_pat_token:
        return GitHubAuthenticationType.PAT

    if all(app_settings.values()):
        return GitHubAuthenticationType.APP
    elif any_app_setting:
        missing = [name for name, value in app_settings.items() if not value]
        raise GitHubAuthenticationConfigurationUndefinedError("Incomplete GitHub App configuration - missing settings include " + ", ".join(missing))
    else:
        raise GitHubAuthenticationConfigurationUndefinedError(
            "No GitHub authentication configuration provided. Please provide either a PAT or a GitHub App configuration."
        )


def parse_notify_emails(value: str | None) -> list[str]:
    """Split a comma separated list of email addresses, dropping blanks."""
    if not value:
        return []
    return [address.strip() for address in value.split(",") if address.strip()]


async def reconcile_sync_configuration(settings: Settings, require_notify_emails: bool = True) -> SyncConfig:
    """Reconciles environment settings into the configuration used to sync templates.

    The webhook secret is not required here. The webhook handler reports a
    missing secret on each request.

    Raises:
        RequiredConfigurationElementError: If a required setting is missing.
        GitHubAuthenticationConfigurationUndefinedError: If GitHub authentication is misconfigured.
    """
    if not settings.REPO:
        raise RequiredConfigurationElementError("Template repository (owner/repo)", "REPO")
    if not settings.MANDRILL_API_KEY:
        raise RequiredConfigurationElementError("Mandrill API key", "MANDRILL_API_KEY")
    if not settings.MANDRILL_DEFAULT_FROM_EMAIL:
        raise RequiredConfigurationElementError("Mandrill default sender email", "MANDRILL_DEFAULT_FROM_EMAIL")
    notify_emails = parse_notify_emails(settings.NOTIFY_EMAILS)
    if require_notify_emails and not notify_emails:
        raise RequiredConfigurationElementError("Notification recipients", "NOTIFY_EMAILS")

    github_auth_type = await validate_github_authentication_configuration(
        github_pat_token=settings.GITHUB_PAT_TOKEN,
        github_app_id=settings.GITHUB_APP_ID,
        github_app_private_key_path=settings.GITHUB_APP_PRIVATE_KEY_PATH,
        github_app_installation_id=settings.GITHUB_APP_INSTALLATION_ID,
    )

    return SyncConfig(
        debug=settings.DEBUG,
        repo=settings.REPO,
        sync_branch=settings.GITHUB_SYNC_BRANCH,
        webhook_secret=settings.GITHUB_WEBHOOK_SECRET,
        github_api_url=settings.GITHUB_API_URL,
        github_authentication_type=github_auth_type,
        github_pat_token=settings.GITHUB_PAT_TOKEN,
        github_app_id=settings.GITHUB_APP_ID,
        github_app_private_key_path=settings.GITHUB_APP_PRIVATE_KEY_PATH,
        github_app_installation_id=settings.GITHUB_APP_INSTALLATION_ID,
        mandrill_api_key=settings.MANDRILL_API_KEY,
        mandrill_api_url=settings.MANDRILL_API_URL,
        default_from_email=settings.MANDRILL_DEFAULT_FROM_EMAIL,
        default_from_name=settings.MANDRILL_DEFAULT_FROM_NAME,
        notify_emails=notify_emails,
        local_template_dir_path=settings.LOCAL_TEMPLATE_DIR_PATH,
    )


async def reconcile_import_configuration(settings: Settings) -> ImportConfig:
    """Reconciles environment settings into the configuration used to import templates.

    Importing only talks to Mandrill, so neither the template repository nor
    GitHub credentials are required.

    Raises:
        RequiredConfigurationElementError: If the Mandrill API key is missing.
    """
    if not settings.MANDRILL_API_KEY:
        raise RequiredConfigurationElementError("Mandrill API key", "MANDRILL_API_KEY")
    return ImportConfig(
        debug=settings.DEBUG,
        mandrill_api_key=settings.MANDRILL_API_KEY,
        mandrill_api_url=settings.MANDRILL_API_URL,
        local_template_dir_path=settings.LOCAL_TEMPLATE_DIR_PATH,
    )
