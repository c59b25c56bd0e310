"""Base ABCs for the template store and message dispatch collaborators."""

from abc import ABC, abstractmethod
from typing import Any


class TemplateStoreBase(ABC):
    """Base ABC for a remote email template store."""

    @abstractmethod
    async def update_template(self, name: str, **fields: Any) -> Any:
        """Replace an existing template. Fails if no template has the given name."""
        pass

    @abstractmethod
    async def add_template(self, name: str, **fields: Any) -> Any:
        """Create a template. Fails if the template exists or is invalid."""
        pass

    @abstractmethod
    async def delete_template(self, name: str) -> Any:
        """Delete a template. Fails if no template has the given name."""
        pass

    @abstractmethod
    async def list_templates(self, label: str | None = None) -> list[dict[str, Any]]:
        """List template summaries, optionally only those with a label."""
        pass


class MessageSenderBase(ABC):
    """Base ABC for an email dispatch service."""

    @abstractmethod
    async def send_message(self, from_email: str, from_name: str | None, to: list[str], subject: str, html: str) -> Any:
        """Send an HTML email message."""
        pass
