"""FastAPI application receiving GitHub push webhooks."""

import asyncio
from typing import Awaitable, Callable

import structlog
from fastapi import Depends, FastAPI, Request, Response
from pydantic import BaseModel

from email_vcs.synchronize.driver import build_webhook_handler
from email_vcs.webhook.handler import WebhookHandler

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class HealthResponse(BaseModel):
    """Response of the health check endpoint."""

    status: str


def create_app(handler_factory: Callable[[], Awaitable[WebhookHandler]] = build_webhook_handler) -> FastAPI:
    """Create the FastAPI application exposing the webhook endpoint.

    The handler is built on first use and shared by later requests. It holds
    no per-request state.
    """
    app = FastAPI(title="EmailVCS Webhook Service", version="1.0.0")
    app.state.handler = None
    handler_lock = asyncio.Lock()

    async def get_handler() -> WebhookHandler:
        """Return the shared handler, building it on first use."""
        async with handler_lock:
            if app.state.handler is None:
                logger.info("Building webhook handler")
                app.state.handler = await handler_factory()
        return app.state.handler

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Report that the service is up."""
        return HealthResponse(status="ok")

    @app.post("/webhook")
    async def receive_webhook(request: Request, handler: WebhookHandler = Depends(get_handler)) -> Response:
        """Sync the templates touched by a GitHub push event."""
        raw_body = await request.body()
        result = await handler.handle(request.headers, raw_body)
        return Response(content=result.body, status_code=result.status_code, headers=result.headers)

    return app
