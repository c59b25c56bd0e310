"""Contains utility functions for GitHub interactions."""

REF_PREFIX = "refs/heads/"


def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the template repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A template repository (owner/repo) is required in config.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def branch_ref(branch: str) -> str:
    """Return the fully qualified ref a push event reports for a branch."""
    return f"{REF_PREFIX}{branch}"
