"""GitHub client adapter for the githubkit library."""

import base64
from functools import wraps
from pathlib import Path
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import GitHubException, RequestFailed
from githubkit.versions.latest.models import ContentDirectoryItems, ContentFile

from email_vcs.configuration.models import GitHubAuthenticationType
from email_vcs.utils.github import split_repository_in_configuration

from .abc import SourceControlClientBase
from .client import GitHubClient, get_github_client
from .exceptions import FileNotFoundInRepositoryError, SourceControlError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_github_errors(func: F) -> F:
    """Decorator translating githubkit failures into source control errors.

    A 404 becomes FileNotFoundInRepositoryError. Nothing is retried.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except RequestFailed as exc:
            url = getattr(exc.response, "url", None)
            if exc.response.status_code == 404:
                raise FileNotFoundInRepositoryError(f"GitHub 404 in {func.__name__} | url: {url}") from exc
            logger.error(
                "GitHub request failed",
                function=func.__name__,
                url=url,
                status_code=exc.response.status_code,
            )
            raise SourceControlError(f"GitHub {exc.response.status_code} error in {func.__name__} | url: {url}") from exc
        except GitHubException as exc:
            logger.error("GitHub request could not be completed", function=func.__name__, error=str(exc))
            raise SourceControlError(f"GitHub request error in {func.__name__}: {exc}") from exc

    return wrapper  # type: ignore


class GitHubKitAdapter(SourceControlClientBase):
    """GitHub client adapter for the githubkit library, reading from a single branch."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str, ref: str | None = None) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name
        self.ref = ref

    @classmethod
    async def create(
        cls,
        repo: str,
        github_auth_type: GitHubAuthenticationType,
        ref: str | None = None,
        github_pat_token: str | None = None,
        github_app_id: int | None = None,
        github_app_private_key_path: Path | None = None,
        github_app_installation_id: int | None = None,
        github_api_url: str = "https://api.github.com",
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_auth_type: Type of authentication (PAT or APP)
            ref: Branch that files are read from (defaults to the repository's default branch)
            github_pat_token: Personal access token (required for PAT auth)
            github_app_id: GitHub App ID (required for APP auth)
            github_app_private_key_path: Path to private key file (required for APP auth)
            github_app_installation_id: Installation ID (required for APP auth)
            github_api_url: GitHub API URL (defaults to https://api.github.com)

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            ValueError: If the repository is not in 'owner/repo' format
        """
        owner, repo_name = split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
            ref=ref,
        )
        client = get_github_client(
            github_auth_type=github_auth_type,
            github_pat_token=github_pat_token,
            github_app_id=github_app_id,
            github_app_private_key_path=github_app_private_key_path,
            github_app_installation_id=github_app_installation_id,
            github_api_url=github_api_url,
        )
        return cls(client, owner, repo_name, ref)

    async def _get_content(self, path: str) -> Any:
        """Get the contents API representation of a file or directory."""
        params: dict[str, Any] = {"owner": self.owner, "repo": self.repo_name, "path": path}
        if self.ref:
            params["ref"] = self.ref
        response: Response[Any] = await self.client.rest.repos.async_get_content(**params)
        return response.parsed_data

    @handle_github_errors
    async def list_files(self, path: str = "") -> list[str]:
        """List the full path of every file below a directory, recursively."""
        content = await self._get_content(path)
        if not isinstance(content, list):
            return [content.path]

        files: list[str] = []
        entry: ContentDirectoryItems
        for entry in content:
            if entry.type == "dir":
                files.extend(await self.list_files(entry.path))
            elif entry.type == "file":
                files.append(entry.path)
        logger.debug("Listed repository files", path=path, file_count=len(files))
        return files

    @handle_github_errors
    async def get_raw_content(self, path: str) -> str:
        """Get the decoded content of a file."""
        content: ContentFile = await self._get_content(path)
        if isinstance(content, list) or getattr(content, "content", None) is None:
            raise SourceControlError(f"Path is not a file: {path}")
        return base64.b64decode(content.content).decode("utf-8")

    @handle_github_errors
    async def get_browse_url(self, path: str) -> str:
        """Get the html_url of a file."""
        content = await self._get_content(path)
        html_url = None if isinstance(content, list) else getattr(content, "html_url", None)
        if not html_url:
            raise SourceControlError(f"No browse URL available for path: {path}")
        return html_url
