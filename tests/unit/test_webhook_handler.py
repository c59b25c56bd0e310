"""Unit tests for the GitHub push webhook handler."""

import json
from dataclasses import replace
from typing import Any
from unittest.mock import AsyncMock

import pytest

from email_vcs.configuration.models import SyncConfig
from email_vcs.github.exceptions import FileNotFoundInRepositoryError, SourceControlError
from email_vcs.mandrill.exceptions import MandrillAPIError, UnknownTemplateError
from email_vcs.webhook.handler import WebhookHandler
from email_vcs.webhook.signature import sign_request_body

VALID_TEMPLATE = "# Subject\nHello\n\n# Html\n<p>Hello</p>\n\n# Labels\n* greeting\n"


def make_body(ref: str = "refs/heads/master", commits: list[dict[str, Any]] | None = None) -> bytes:
    """Encode a push event payload."""
    return json.dumps({"ref": ref, "commits": commits or []}).encode("utf-8")


def make_headers(body: bytes, secret: str = "s3cret") -> dict[str, str]:
    """Build the headers GitHub sends with a signed push event."""
    return {
        "X-Hub-Signature": sign_request_body(secret, body),
        "X-GitHub-Event": "push",
        "X-GitHub-Delivery": "72d3162e-cc78-11e3-81ab-4c9367dc0958",
    }


def make_handler(config: SyncConfig, contents: dict[str, str] | None = None, repository_paths: list[str] | None = None) -> WebhookHandler:
    """Build a handler whose source serves the given contents and whose store and mailer are mocks."""
    contents = contents or {}
    source = AsyncMock()

    async def get_raw_content(path: str) -> str:
        if path not in contents:
            raise FileNotFoundInRepositoryError(path)
        return contents[path]

    async def get_browse_url(path: str) -> str:
        if path not in contents:
            raise FileNotFoundInRepositoryError(path)
        return f"https://github.com/{config.repo}/blob/master/{path}"

    source.get_raw_content.side_effect = get_raw_content
    source.get_browse_url.side_effect = get_browse_url
    source.list_files.return_value = list(contents) if repository_paths is None else repository_paths
    return WebhookHandler(config=config, source=source, store=AsyncMock(), mailer=AsyncMock())


@pytest.mark.asyncio
async def test_missing_secret_is_rejected(sync_config: SyncConfig) -> None:
    """Test that a request is rejected when no webhook secret is configured."""
    handler = make_handler(replace(sync_config, webhook_secret=None))
    body = make_body()

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 401
    assert response.body == "Must provide a 'GITHUB_WEBHOOK_SECRET' env variable"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "missing_header,status_code,message",
    [
        pytest.param("X-Hub-Signature", 401, "No X-Hub-Signature found on request", id="signature"),
        pytest.param("X-GitHub-Event", 422, "No X-Github-Event found on request", id="event"),
        pytest.param("X-GitHub-Delivery", 401, "No X-Github-Delivery found on request", id="delivery"),
    ],
)
async def test_missing_header_is_rejected(sync_config: SyncConfig, missing_header: str, status_code: int, message: str) -> None:
    """Test that each required header is checked with its own status and message."""
    handler = make_handler(sync_config)
    body = make_body()
    headers = make_headers(body)
    del headers[missing_header]

    response = await handler.handle(headers, body)

    assert response.status_code == status_code
    assert response.body == message
    assert response.headers["Content-Type"] == "text/plain"


@pytest.mark.asyncio
async def test_signature_mismatch_is_rejected(sync_config: SyncConfig) -> None:
    """Test that a body signed with another secret is rejected."""
    handler = make_handler(sync_config)
    body = make_body()

    response = await handler.handle(make_headers(body, secret="wrong"), body)

    assert response.status_code == 401
    assert response.body == "X-Hub-Signature incorrect. Github webhook token doesn't match"
    handler.store.update_template.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "signature",
    [
        pytest.param("sha1=\u00e9", id="latin-1 character"),
        pytest.param("sha1=\u2603", id="non latin-1 character"),
    ],
)
async def test_non_ascii_signature_is_rejected(sync_config: SyncConfig, signature: str) -> None:
    """Test that a signature header holding non-ASCII characters is a mismatch."""
    handler = make_handler(sync_config)
    body = make_body()
    headers = make_headers(body)
    headers["X-Hub-Signature"] = signature

    response = await handler.handle(headers, body)

    assert response.status_code == 401
    assert response.body == "X-Hub-Signature incorrect. Github webhook token doesn't match"


@pytest.mark.asyncio
async def test_signature_covers_raw_body(sync_config: SyncConfig) -> None:
    """Test that a re-serialized body no longer matches the signature of the received bytes."""
    handler = make_handler(sync_config)
    body = make_body(ref="refs/heads/develop")
    reserialized = json.dumps(json.loads(body), indent=2).encode("utf-8")

    response = await handler.handle(make_headers(body), reserialized)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_headers_are_matched_case_insensitively(sync_config: SyncConfig) -> None:
    """Test that lower-cased header names are accepted."""
    handler = make_handler(sync_config)
    body = make_body(ref="refs/heads/develop")
    headers = {name.lower(): value for name, value in make_headers(body).items()}

    response = await handler.handle(headers, body)

    assert response.status_code == 203


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        pytest.param(b"not json", id="invalid json"),
        pytest.param(b"[1, 2, 3]", id="not an object"),
        pytest.param(b'{"ref": "refs/heads/master", "commits": "oops"}', id="malformed commits"),
    ],
)
async def test_invalid_payload_is_rejected(sync_config: SyncConfig, body: bytes) -> None:
    """Test that a correctly signed body that is not a push event is rejected."""
    handler = make_handler(sync_config)

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_push_to_other_branch_is_skipped(sync_config: SyncConfig) -> None:
    """Test that a push to a branch other than the sync branch makes no store or email calls."""
    handler = make_handler(sync_config, {"a/b.md": VALID_TEMPLATE})
    body = make_body(ref="refs/heads/feature", commits=[{"added": ["a/b.md"]}])

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 203
    assert response.headers == {"processed": "0"}
    handler.source.get_raw_content.assert_not_awaited()
    handler.store.update_template.assert_not_awaited()
    handler.mailer.send_message.assert_not_awaited()


@pytest.mark.asyncio
async def test_push_syncs_touched_files_and_notifies(sync_config: SyncConfig) -> None:
    """Test that every touched file is synced once and a single notification is sent."""
    handler = make_handler(sync_config, {"welcome/user.md": VALID_TEMPLATE, "reset.md": VALID_TEMPLATE})
    handler.store.update_template.side_effect = [UnknownTemplateError("Unknown_Template", "No such template"), {}]
    body = make_body(
        commits=[
            {"added": ["welcome/user.md"], "modified": [], "removed": []},
            {"added": [], "modified": ["welcome/user.md", "reset.md"], "removed": ["old/gone.md"]},
        ]
    )

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 200
    assert response.headers["processed"] == "3"
    assert response.headers["Content-Type"] == "application/json"
    assert json.loads(response.body) == {"input": json.loads(body), "files": ["welcome/user.md", "reset.md", "old/gone.md"]}
    assert handler.store.update_template.await_count == 2
    handler.store.delete_template.assert_awaited_once_with("old-gone")
    handler.mailer.send_message.assert_awaited_once()
    assert handler.mailer.send_message.await_args.kwargs["to"] == ["ops@example.com", "dev@example.com"]


@pytest.mark.asyncio
async def test_colliding_path_is_dropped_and_reported(sync_config: SyncConfig) -> None:
    """Test that a path aliasing an untouched repository file is not synced and is reported."""
    handler = make_handler(
        sync_config,
        {"x-y.md": VALID_TEMPLATE, "x/y.md": VALID_TEMPLATE},
        repository_paths=["x/y.md", "x-y.md", "other.md"],
    )
    body = make_body(commits=[{"modified": ["x-y.md"]}])

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 200
    assert json.loads(response.body)["files"] == []
    handler.store.update_template.assert_not_awaited()
    html = handler.mailer.send_message.await_args.kwargs["html"]
    assert "x-y.md causes duplication once converted to x-y" in html


@pytest.mark.asyncio
async def test_listing_failure_is_reported_and_sync_continues(sync_config: SyncConfig) -> None:
    """Test that a repository listing failure is reported while the batch is still synced."""
    handler = make_handler(sync_config, {"a/b.md": VALID_TEMPLATE})
    handler.source.list_files.side_effect = SourceControlError("GitHub 500 error")
    body = make_body(commits=[{"modified": ["a/b.md"]}])

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 200
    handler.store.update_template.assert_awaited_once()
    html = handler.mailer.send_message.await_args.kwargs["html"]
    assert "Unable to list repository files: GitHub 500 error" in html


@pytest.mark.asyncio
async def test_notification_failure_returns_bad_gateway(sync_config: SyncConfig) -> None:
    """Test that a failure to send the notification becomes a 502 with the reason."""
    handler = make_handler(sync_config, {"a/b.md": VALID_TEMPLATE})
    handler.mailer.send_message.side_effect = MandrillAPIError("Invalid_Key", "Invalid API key")
    body = make_body(commits=[{"modified": ["a/b.md"]}])

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 502
    assert response.body == "Unable to send notification via mandrill: Invalid_Key: Invalid API key"


@pytest.mark.asyncio
async def test_unexpected_sync_failure_is_reported(sync_config: SyncConfig) -> None:
    """Test that an unexpected per-file failure is reported in the notification and the request still succeeds."""
    handler = make_handler(sync_config, {"a/b.md": VALID_TEMPLATE})
    handler.store.update_template.side_effect = RuntimeError("connection reset")
    body = make_body(commits=[{"modified": ["a/b.md"]}])

    response = await handler.handle(make_headers(body), body)

    assert response.status_code == 200
    html = handler.mailer.send_message.await_args.kwargs["html"]
    assert "Unexpected error while syncing: connection reset" in html
