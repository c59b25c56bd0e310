"""Reconciles changed repository files against the template store."""

import asyncio
import time
from typing import Sequence

import structlog

from email_vcs.configuration.models import TemplateDefaults
from email_vcs.github.abc import SourceControlClientBase
from email_vcs.github.exceptions import FileNotFoundInRepositoryError, SourceControlError
from email_vcs.mandrill.abc import TemplateStoreBase
from email_vcs.synchronize.exceptions import ReconciliationError, RemoveError, UpsertError
from email_vcs.synchronize.naming import to_remote_id
from email_vcs.synchronize.results import SyncOutcome
from email_vcs.synchronize.templates import remove_template, upsert_template
from email_vcs.templates import ParseError, parse_markdown

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def sync_template_file(
    path: str,
    source: SourceControlClientBase,
    store: TemplateStoreBase,
    outcome: SyncOutcome,
    defaults: TemplateDefaults,
) -> None:
    """Synchronize a single repository file to the template store.

    A file that can no longer be fetched because it does not exist is removed
    from the store. Every expected failure is recorded into the outcome
    instead of being raised.
    """
    remote_id = to_remote_id(path)
    try:
        content = await source.get_raw_content(path)
    except FileNotFoundInRepositoryError:
        logger.info("File no longer exists in repository, removing template", path=path, remote_id=remote_id)
        try:
            await remove_template(store, remote_id)
        except RemoveError as exc:
            outcome.errors.append(str(exc))
            return
        outcome.actions.removed.append(path)
        return
    except SourceControlError as exc:
        logger.warning("Unable to fetch file", path=path, error=str(exc))
        outcome.errors.append(f"Unable to fetch file: {path} ({exc})")
        return

    try:
        record = parse_markdown(content)
    except ParseError as exc:
        logger.warning("Unable to parse file", path=path, error=str(exc))
        outcome.errors.append(f"Unable to parse file: {path} ({exc})")
        return

    try:
        result = await upsert_template(store, remote_id, record, defaults)
    except UpsertError as exc:
        outcome.errors.append(str(exc))
        return
    if result.created:
        outcome.actions.added.append(path)
    else:
        outcome.actions.modified.append(path)


async def sync_templates(
    paths: Sequence[str],
    source: SourceControlClientBase,
    store: TemplateStoreBase,
    outcome: SyncOutcome,
    defaults: TemplateDefaults,
) -> None:
    """Synchronize every path to the template store concurrently.

    Returns once every path has either been synchronized or recorded as an
    error in the outcome.

    Raises:
        ReconciliationError: If any per-file task failed with an unexpected exception.
    """
    start_time = time.time()
    logger.info("Synchronizing templates", path_count=len(paths))
    results = await asyncio.gather(
        *(sync_template_file(path, source, store, outcome, defaults) for path in paths),
        return_exceptions=True,
    )
    unexpected_errors = [result for result in results if isinstance(result, BaseException)]
    logger.info(
        "Synchronized templates",
        duration=round(time.time() - start_time, 2),
        added=len(outcome.actions.added),
        modified=len(outcome.actions.modified),
        removed=len(outcome.actions.removed),
        error_count=len(outcome.errors),
        unexpected_error_count=len(unexpected_errors),
    )
    if unexpected_errors:
        for error in unexpected_errors:
            logger.error("Template sync task failed unexpectedly", error=str(error), error_type=type(error).__name__)
        raise ReconciliationError(unexpected_errors)
