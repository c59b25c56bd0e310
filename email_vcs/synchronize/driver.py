"""Orchestrates the construction of collaborators and template sync runs."""

import time
from pathlib import Path

import structlog

from email_vcs.configuration.env import Settings
from email_vcs.configuration.models import ImportConfig, SyncConfig
from email_vcs.configuration.reconcile import reconcile_sync_configuration
from email_vcs.github.adapter import GitHubKitAdapter
from email_vcs.mandrill.adapter import MandrillAdapter
from email_vcs.notify.notifier import notify_changes
from email_vcs.synchronize.importer import import_templates
from email_vcs.synchronize.naming import deduplicate_paths
from email_vcs.synchronize.reconciler import sync_templates
from email_vcs.synchronize.results import SyncOutcome
from email_vcs.webhook.handler import WebhookHandler

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def create_github_adapter(config: SyncConfig) -> GitHubKitAdapter:
    """Create the source control adapter reading from the sync branch."""
    return await GitHubKitAdapter.create(
        repo=config.repo,
        github_auth_type=config.github_authentication_type,
        ref=config.sync_branch,
        github_pat_token=config.github_pat_token,
        github_app_id=config.github_app_id,
        github_app_private_key_path=config.github_app_private_key_path,
        github_app_installation_id=config.github_app_installation_id,
        github_api_url=config.github_api_url,
    )


def create_mandrill_adapter(config: SyncConfig | ImportConfig) -> MandrillAdapter:
    """Create the template store and message dispatch adapter."""
    return MandrillAdapter.create(api_key=config.mandrill_api_key, api_url=config.mandrill_api_url, debug=config.debug)


async def build_webhook_handler(settings: Settings | None = None) -> WebhookHandler:
    """Build a webhook handler wired to GitHub and Mandrill from environment settings."""
    config = await reconcile_sync_configuration(settings or Settings())
    mandrill_adapter = create_mandrill_adapter(config)
    return WebhookHandler(
        config=config,
        source=await create_github_adapter(config),
        store=mandrill_adapter,
        mailer=mandrill_adapter,
    )


async def run_sync_workflow(config: SyncConfig, paths: list[str], notify: bool = True) -> SyncOutcome:
    """Sync an explicit list of repository paths, outside of any webhook.

    Collisions are checked against the repository tree as they are for a push.
    """
    outcome = SyncOutcome()
    github_adapter = await create_github_adapter(config)
    mandrill_adapter = create_mandrill_adapter(config)
    try:
        start_time = time.time()
        repository_paths = await github_adapter.list_files()
        kept_paths, collisions = deduplicate_paths(paths, repository_paths)
        outcome.errors.extend(collisions)
        await sync_templates(kept_paths, github_adapter, mandrill_adapter, outcome, config.template_defaults)
        logger.info("Completed manual sync", duration=round(time.time() - start_time, 2), path_count=len(kept_paths))
        if notify:
            await notify_changes(
                outcome,
                github_adapter,
                mandrill_adapter,
                repo=config.repo,
                from_email=config.default_from_email,
                from_name=config.default_from_name,
                recipients=config.notify_emails,
            )
    finally:
        await mandrill_adapter.close()
    return outcome


async def run_import_workflow(config: ImportConfig) -> list[Path]:
    """Import every published Mandrill template into the local template directory."""
    mandrill_adapter = create_mandrill_adapter(config)
    try:
        return await import_templates(mandrill_adapter, config.local_template_dir_path)
    finally:
        await mandrill_adapter.close()
