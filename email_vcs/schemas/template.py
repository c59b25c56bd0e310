"""Pydantic schema for a parsed markdown email template."""

from pydantic import BaseModel, Field


class TemplateRecord(BaseModel):
    """Pydantic model for an email template parsed from markdown.

    A field set to None means the corresponding section was absent from the
    document, which is distinct from a section that is present but empty.
    """

    subject: str | None = None
    html: str | None = None
    text: str | None = None
    labels: list[str] = Field(default_factory=list)
    from_email: str | None = None
    from_name: str | None = None
