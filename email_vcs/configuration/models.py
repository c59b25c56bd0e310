"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class GitHubAuthenticationType(str, Enum):
    """Enum for GitHub authentication types."""

    PAT = "pat"
    APP = "app"


@dataclass
class TemplateDefaults:
    """Values used for template fields that a markdown template leaves out."""

    from_email: str
    from_name: str | None = None


@dataclass
class SyncConfig:
    """Reconciled configuration for synchronizing templates to Mandrill."""

    debug: bool
    repo: str
    sync_branch: str
    webhook_secret: str | None
    github_api_url: str
    github_authentication_type: GitHubAuthenticationType
    github_pat_token: str | None
    github_app_id: int | None
    github_app_private_key_path: Path | None
    github_app_installation_id: int | None
    mandrill_api_key: str
    mandrill_api_url: str
    default_from_email: str
    default_from_name: str | None
    notify_emails: list[str] = field(default_factory=list)
    local_template_dir_path: Path = Path("templates")

    @property
    def template_defaults(self) -> TemplateDefaults:
        """Defaults applied to templates that omit their sender."""
        return TemplateDefaults(from_email=self.default_from_email, from_name=self.default_from_name)


@dataclass
class ImportConfig:
    """Reconciled configuration for importing templates from Mandrill."""

    debug: bool
    mandrill_api_key: str
    mandrill_api_url: str
    local_template_dir_path: Path = Path("templates")
