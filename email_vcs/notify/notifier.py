"""Renders a sync outcome as an HTML report and emails it."""

import asyncio
from dataclasses import dataclass

import structlog

from email_vcs.github.abc import SourceControlClientBase
from email_vcs.github.exceptions import SourceControlError
from email_vcs.mandrill.abc import MessageSenderBase
from email_vcs.mandrill.exceptions import MandrillAPIError
from email_vcs.notify.exceptions import NotifyError
from email_vcs.synchronize.results import SyncOutcome
from email_vcs.utils.templates import construct_jinja2_environment, construct_jinja2_template_from_string, render_template

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

NOTIFICATION_SUBJECT = "EmailVCS Sync Notification for {repo}"

NOTIFICATION_TEMPLATE = """<html><body>
The following files have been synced from your Github repo "{{ repo }}" to Mandrill:
<br /><br />
{% for title, entries in sections %}
<strong>{{ title }}:</strong><br />
{% for entry in entries %}
{% if entry.url %}<a href="{{ entry.url }}">{{ entry.path }}</a>{% elif entry.removed %}{{ entry.path }} (Removed){% else %}{{ entry.path }}{% endif %}<br />
{% else %}
None<br />
{% endfor %}
<br /><br />
{% endfor %}
<br />
<strong>Errors:</strong><br />
{% for error in errors %}
{{ error }}<br />
{% else %}
None
{% endfor %}
</body></html>
"""


@dataclass
class NotificationEntry:
    """A single path listed in the notification."""

    path: str
    url: str | None = None
    removed: bool = False


async def link_entry(path: str, source: SourceControlClientBase) -> NotificationEntry:
    """Build an entry linking to a path, or mark it removed if it can no longer be browsed."""
    try:
        url = await source.get_browse_url(path)
    except SourceControlError as exc:
        logger.info("File could not be linked in notification", path=path, error=str(exc))
        return NotificationEntry(path=path, removed=True)
    return NotificationEntry(path=path, url=url)


async def render_notification(outcome: SyncOutcome, source: SourceControlClientBase, repo: str) -> str:
    """Render the HTML report for a sync outcome.

    Added and modified paths are linked to the repository. Removed paths are
    listed as plain text.
    """
    added, modified = await asyncio.gather(
        asyncio.gather(*(link_entry(path, source) for path in outcome.actions.added)),
        asyncio.gather(*(link_entry(path, source) for path in outcome.actions.modified)),
    )
    removed = [NotificationEntry(path=path) for path in outcome.actions.removed]
    template = construct_jinja2_template_from_string(NOTIFICATION_TEMPLATE, construct_jinja2_environment(autoescape=True))
    return render_template(
        template,
        repo=repo,
        sections=[("Added", list(added)), ("Modified", list(modified)), ("Removed", removed)],
        errors=outcome.errors,
    )


async def notify_changes(
    outcome: SyncOutcome,
    source: SourceControlClientBase,
    mailer: MessageSenderBase,
    repo: str,
    from_email: str,
    from_name: str | None,
    recipients: list[str],
) -> str:
    """Email the report for a sync outcome to the configured recipients.

    Raises:
        NotifyError: If the message could not be sent.

    Returns:
        str: The HTML report that was sent.
    """
    html = await render_notification(outcome, source, repo)
    try:
        await mailer.send_message(
            from_email=from_email,
            from_name=from_name,
            to=recipients,
            subject=NOTIFICATION_SUBJECT.format(repo=repo),
            html=html,
        )
    except MandrillAPIError as exc:
        logger.error("Unable to send sync notification", repo=repo, error=str(exc))
        raise NotifyError(f"Unable to send notification via mandrill: {exc}") from exc
    logger.info("Sent sync notification", repo=repo, recipient_count=len(recipients))
    return html
