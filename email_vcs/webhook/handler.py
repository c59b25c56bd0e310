"""Handles GitHub push webhooks by syncing the touched templates to Mandrill.

A request moves through validation, branch filtering, aggregation of the
touched files, collision detection, reconciliation and notification. Any
validation failure short-circuits to a plain text rejection, and a push to
a branch other than the sync branch is skipped without touching Mandrill.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Mapping

import structlog
from pydantic import ValidationError as PydanticValidationError

from email_vcs.configuration.models import SyncConfig
from email_vcs.github.abc import SourceControlClientBase
from email_vcs.github.exceptions import SourceControlError
from email_vcs.mandrill.abc import MessageSenderBase, TemplateStoreBase
from email_vcs.notify.exceptions import NotifyError
from email_vcs.notify.notifier import notify_changes
from email_vcs.schemas.push_event import PushEventModel
from email_vcs.synchronize.changes import build_change_set, flatten_touched_paths
from email_vcs.synchronize.exceptions import ReconciliationError
from email_vcs.synchronize.naming import deduplicate_paths
from email_vcs.synchronize.reconciler import sync_templates
from email_vcs.synchronize.results import SyncOutcome
from email_vcs.utils.github import branch_ref
from email_vcs.webhook.exceptions import ValidationError
from email_vcs.webhook.signature import signature_matches

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature"
EVENT_HEADER = "X-GitHub-Event"
DELIVERY_HEADER = "X-GitHub-Delivery"
PROCESSED_HEADER = "processed"


@dataclass
class WebhookResponse:
    """HTTP-shaped response to a webhook request."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None

    @classmethod
    def text(cls, status_code: int, message: str) -> "WebhookResponse":
        """Build a plain text response."""
        return cls(status_code=status_code, headers={"Content-Type": "text/plain"}, body=message)


class WebhookHandler:
    """Validates push events and drives a template sync for each one."""

    def __init__(
        self,
        config: SyncConfig,
        source: SourceControlClientBase,
        store: TemplateStoreBase,
        mailer: MessageSenderBase,
    ) -> None:
        """Initialize the handler with its configuration and collaborators."""
        self.config = config
        self.source = source
        self.store = store
        self.mailer = mailer

    def validate_request(self, headers: Mapping[str, str], raw_body: bytes) -> dict[str, Any]:
        """Validate the secret, headers and signature of a request and decode its body.

        Raises:
            ValidationError: If the request must be rejected.

        Returns:
            dict[str, Any]: The decoded JSON body.
        """
        secret = self.config.webhook_secret
        normalized_headers = {name.lower(): value for name, value in headers.items()}
        signature = normalized_headers.get(SIGNATURE_HEADER.lower())

        if not isinstance(secret, str) or not secret:
            raise ValidationError("Must provide a 'GITHUB_WEBHOOK_SECRET' env variable", 401)
        if not signature:
            raise ValidationError("No X-Hub-Signature found on request", 401)
        if not normalized_headers.get(EVENT_HEADER.lower()):
            raise ValidationError("No X-Github-Event found on request", 422)
        if not normalized_headers.get(DELIVERY_HEADER.lower()):
            raise ValidationError("No X-Github-Delivery found on request", 401)
        if not signature_matches(secret, raw_body, signature):
            raise ValidationError("X-Hub-Signature incorrect. Github webhook token doesn't match", 401)

        try:
            body = json.loads(raw_body)
        except ValueError as exc:
            raise ValidationError(f"Request body is not valid JSON: {exc}", 400) from exc
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object", 400)
        return body

    async def remove_colliding_paths(self, paths: list[str], outcome: SyncOutcome) -> list[str]:
        """Drop paths whose remote identity collides, recording each collision as an error."""
        if not paths:
            return paths
        try:
            repository_paths = await self.source.list_files()
        except SourceControlError as exc:
            logger.warning("Unable to list repository files, checking collisions within the push only", error=str(exc))
            outcome.errors.append(f"Unable to list repository files: {exc}")
            repository_paths = []
        kept_paths, collisions = deduplicate_paths(paths, repository_paths)
        outcome.errors.extend(collisions)
        return kept_paths

    async def handle(self, headers: Mapping[str, str], raw_body: bytes) -> WebhookResponse:
        """Handle a single webhook request.

        Args:
            headers: Request headers, matched case-insensitively.
            raw_body: The exact bytes of the request body, as signed by GitHub.

        Returns:
            WebhookResponse: The response to send back to GitHub.
        """
        outcome = SyncOutcome()
        try:
            body = self.validate_request(headers, raw_body)
            event = PushEventModel.model_validate(body)
        except ValidationError as exc:
            logger.error("Rejected webhook request", status_code=exc.status_code, reason=exc.message)
            return WebhookResponse.text(exc.status_code, exc.message)
        except PydanticValidationError as exc:
            logger.error("Rejected webhook request with malformed push event", error=str(exc))
            return WebhookResponse.text(400, f"Malformed push event: {exc}")

        expected_ref = branch_ref(self.config.sync_branch)
        if event.ref != expected_ref:
            logger.info("Skipping push to a branch that is not synced", ref=event.ref, expected_ref=expected_ref)
            return WebhookResponse(status_code=203, headers={PROCESSED_HEADER: "0"})

        change_set = build_change_set(event.commits)
        files = flatten_touched_paths(event.commits)
        logger.info(
            "Accepted push event",
            ref=event.ref,
            commit_count=len(event.commits),
            added=len(change_set.added),
            modified=len(change_set.modified),
            removed=len(change_set.removed),
            touched_file_count=len(files),
        )
        files = await self.remove_colliding_paths(files, outcome)

        try:
            await sync_templates(files, self.source, self.store, outcome, self.config.template_defaults)
        except ReconciliationError as exc:
            outcome.errors.extend(f"Unexpected error while syncing: {error}" for error in exc.errors)

        try:
            await notify_changes(
                outcome,
                self.source,
                self.mailer,
                repo=self.config.repo,
                from_email=self.config.default_from_email,
                from_name=self.config.default_from_name,
                recipients=self.config.notify_emails,
            )
        except NotifyError as exc:
            return WebhookResponse.text(502, str(exc))

        return WebhookResponse(
            status_code=200,
            headers={PROCESSED_HEADER: str(len(files)), "Content-Type": "application/json"},
            body=json.dumps({"input": body, "files": files}),
        )
