"""Contains upsert and removal logic for templates in the template store."""

from typing import Any

import structlog

from email_vcs.configuration.models import TemplateDefaults
from email_vcs.mandrill.abc import TemplateStoreBase
from email_vcs.mandrill.exceptions import MandrillAPIError, UnknownTemplateError
from email_vcs.schemas.template import TemplateRecord
from email_vcs.synchronize.exceptions import RemoveError, UpsertError
from email_vcs.synchronize.results import UpsertResult

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def build_template_fields(record: TemplateRecord, defaults: TemplateDefaults) -> dict[str, Any]:
    """Build the template store fields for a parsed template.

    Absent sender fields fall back to the configured defaults. Other absent
    fields are passed as None and left out of the request.
    """
    return {
        "from_email": record.from_email if record.from_email is not None else defaults.from_email,
        "from_name": record.from_name if record.from_name is not None else defaults.from_name,
        "subject": record.subject,
        "code": record.html,
        "text": record.text,
        "labels": list(record.labels),
        "publish": True,
    }


async def upsert_template(store: TemplateStoreBase, remote_id: str, record: TemplateRecord, defaults: TemplateDefaults) -> UpsertResult:
    """Replace a template in the store, creating it if it does not exist yet.

    Raises:
        UpsertError: If the update fails for any reason other than a missing
            template, or if the fallback create fails.

    Returns:
        UpsertResult: Whether the template had to be created.
    """
    fields = build_template_fields(record, defaults)
    try:
        await store.update_template(remote_id, **fields)
    except UnknownTemplateError:
        logger.info("Template not found in template store, creating it", remote_id=remote_id)
    except MandrillAPIError as exc:
        logger.warning("Unable to update template", remote_id=remote_id, error=str(exc))
        raise UpsertError(remote_id) from exc
    else:
        logger.info("Updated template", remote_id=remote_id)
        return UpsertResult(remote_id=remote_id, created=False)

    try:
        await store.add_template(remote_id, **fields)
    except MandrillAPIError as exc:
        logger.warning("Unable to create template", remote_id=remote_id, error=str(exc))
        raise UpsertError(remote_id) from exc
    logger.info("Created template", remote_id=remote_id)
    return UpsertResult(remote_id=remote_id, created=True)


async def remove_template(store: TemplateStoreBase, remote_id: str) -> None:
    """Delete a template from the store.

    Raises:
        RemoveError: If the store rejects the delete, including when the template is already absent.
    """
    try:
        await store.delete_template(remote_id)
    except MandrillAPIError as exc:
        logger.warning("Unable to remove template", remote_id=remote_id, error=str(exc))
        raise RemoveError(remote_id) from exc
    logger.info("Removed template", remote_id=remote_id)
