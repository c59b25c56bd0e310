"""Custom exceptions for the synchronize module."""


class CollisionError(Exception):
    """Raised when a path would alias the remote identity of another path."""

    def __init__(self, path: str, remote_id: str) -> None:
        """Initializes the exception with the offending path and its remote identity."""
        super().__init__(f"{path} causes duplication once converted to {remote_id}")
        self.path = path
        self.remote_id = remote_id


class UpsertError(Exception):
    """Raised when a template could neither be updated nor created."""

    def __init__(self, remote_id: str) -> None:
        """Initializes the exception with the remote identity of the template."""
        super().__init__(f"Unable to sync file: {remote_id}")
        self.remote_id = remote_id


class RemoveError(Exception):
    """Raised when a template could not be deleted."""

    def __init__(self, remote_id: str) -> None:
        """Initializes the exception with the remote identity of the template."""
        super().__init__(f"Unable to remove file: {remote_id}")
        self.remote_id = remote_id


class ReconciliationError(Exception):
    """Raised when per-file sync tasks fail with unexpected errors."""

    def __init__(self, errors: list[BaseException]) -> None:
        """Initializes the exception with the unexpected errors."""
        super().__init__(f"{len(errors)} sync task(s) failed unexpectedly.")
        self.errors = errors
