"""Mandrill API adapter for the template store and message dispatch collaborators."""

from typing import Any, Self

import httpx
import structlog

from .abc import MessageSenderBase, TemplateStoreBase
from .client import DEFAULT_MANDRILL_API_URL, get_mandrill_client
from .exceptions import MandrillAPIError, UnknownTemplateError

logger = structlog.get_logger(__name__)


class MandrillAdapter(TemplateStoreBase, MessageSenderBase):
    """Mandrill API adapter built on an httpx client."""

    def __init__(self, client: httpx.AsyncClient, api_key: str) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.api_key = api_key

    @classmethod
    def create(cls, api_key: str, api_url: str = DEFAULT_MANDRILL_API_URL, debug: bool = False) -> Self:
        """Create a new Mandrill adapter.

        Args:
            api_key: Mandrill API key
            api_url: Mandrill API URL (defaults to https://mandrillapp.com/api/1.0)
            debug: Log every request and response

        Returns:
            Configured MandrillAdapter instance

        Raises:
            ValueError: If no API key is given
        """
        if not api_key:
            raise ValueError("Mandrill API access requires an API key.")
        logger.info("Creating client for Mandrill API", api_url=api_url, debug=debug)
        return cls(get_mandrill_client(api_url, debug=debug), api_key)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    async def _call(self, endpoint: str, **params: Any) -> Any:
        """Call a Mandrill API endpoint and return its decoded JSON response."""
        payload = {"key": self.api_key, **params}
        try:
            response = await self.client.post(f"{endpoint}.json", json=payload)
        except httpx.HTTPError as exc:
            logger.error("Mandrill API request failed", endpoint=endpoint, error=str(exc))
            raise MandrillAPIError("HTTP_Error", str(exc)) from exc

        if response.is_success:
            return response.json()

        try:
            error_data = response.json()
        except ValueError:
            error_data = {}
        if not isinstance(error_data, dict):
            error_data = {}
        name = error_data.get("name", "Unknown_Error")
        message = error_data.get("message", response.reason_phrase)
        logger.warning(
            "Mandrill API returned an error",
            endpoint=endpoint,
            status_code=response.status_code,
            error_name=name,
            message=message,
        )
        if name == "Unknown_Template":
            raise UnknownTemplateError(name, message, response.status_code)
        raise MandrillAPIError(name, message, response.status_code)

    # Template CRUD
    async def update_template(self, name: str, **fields: Any) -> dict[str, Any]:
        """Replace an existing template."""
        return await self._call("templates/update", name=name, **self._omit_null_parameters(**fields))

    async def add_template(self, name: str, **fields: Any) -> dict[str, Any]:
        """Create a template."""
        return await self._call("templates/add", name=name, **self._omit_null_parameters(**fields))

    async def delete_template(self, name: str) -> dict[str, Any]:
        """Delete a template."""
        return await self._call("templates/delete", name=name)

    async def list_templates(self, label: str | None = None) -> list[dict[str, Any]]:
        """List all templates, optionally only those with a label."""
        return await self._call("templates/list", **self._omit_null_parameters(label=label))

    # Messages
    async def send_message(self, from_email: str, from_name: str | None, to: list[str], subject: str, html: str) -> list[dict[str, Any]]:
        """Send an HTML email message to each recipient."""
        message = self._omit_null_parameters(
            from_email=from_email,
            from_name=from_name,
            to=[{"email": address, "type": "to"} for address in to],
            subject=subject,
            html=html,
        )
        result = await self._call("messages/send", message=message)
        logger.info("Sent message through Mandrill", subject=subject, recipient_count=len(to))
        return result
