"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio

from email_vcs.configuration import reconcile
from email_vcs.configuration.env import Settings
from email_vcs.configuration.models import ImportConfig, SyncConfig


def get_sync_config(settings: Settings | None = None, require_notify_emails: bool = True) -> SyncConfig:
    """Synchronously get the reconciled sync configuration."""
    if settings is None:
        settings = Settings()
    return asyncio.run(reconcile.reconcile_sync_configuration(settings, require_notify_emails=require_notify_emails))


def get_import_config(settings: Settings | None = None) -> ImportConfig:
    """Synchronously get the reconciled import configuration."""
    if settings is None:
        settings = Settings()
    return asyncio.run(reconcile.reconcile_import_configuration(settings))
