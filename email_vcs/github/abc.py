"""Base ABC for source control clients."""

from abc import ABC, abstractmethod


class SourceControlClientBase(ABC):
    """Base ABC for source control clients serving template files."""

    @abstractmethod
    async def list_files(self, path: str = "") -> list[str]:
        """List the full path of every file below a directory, recursively."""
        pass

    @abstractmethod
    async def get_raw_content(self, path: str) -> str:
        """Get the decoded content of a file.

        Raises FileNotFoundInRepositoryError if the file does not exist.
        """
        pass

    @abstractmethod
    async def get_browse_url(self, path: str) -> str:
        """Get the URL at which a person can view a file."""
        pass
