"""Pydantic schema for the subset of a GitHub push event that drives a sync."""

from pydantic import BaseModel, ConfigDict, Field


class CommitModel(BaseModel):
    """Pydantic model for a commit within a push event."""

    model_config = ConfigDict(extra="allow")

    added: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


class PushEventModel(BaseModel):
    """Pydantic model for a GitHub push event payload."""

    model_config = ConfigDict(extra="allow")

    ref: str | None = None
    commits: list[CommitModel] = Field(default_factory=list)
