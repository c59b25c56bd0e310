"""Sets up the HTTP client used to call the Mandrill API."""

import httpx
import structlog

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DEFAULT_MANDRILL_API_URL = "https://mandrillapp.com/api/1.0"
DEFAULT_MANDRILL_TIMEOUT = 30.0


async def log_request(request: httpx.Request) -> None:
    """Log an outgoing Mandrill request."""
    logger.debug("Mandrill request", method=request.method, url=str(request.url))


async def log_response(response: httpx.Response) -> None:
    """Log a Mandrill response."""
    logger.debug(
        "Mandrill response",
        method=response.request.method,
        url=str(response.request.url),
        status_code=response.status_code,
    )


def get_mandrill_client(
    api_url: str = DEFAULT_MANDRILL_API_URL,
    timeout: float = DEFAULT_MANDRILL_TIMEOUT,
    debug: bool = False,
) -> httpx.AsyncClient:
    """Returns an HTTP client for the Mandrill JSON API.

    In debug mode every request and response is logged.
    """
    event_hooks = {"request": [log_request], "response": [log_response]} if debug else None
    return httpx.AsyncClient(
        base_url=api_url,
        headers={"User-Agent": "email-vcs/1.0"},
        timeout=timeout,
        event_hooks=event_hooks,
    )
