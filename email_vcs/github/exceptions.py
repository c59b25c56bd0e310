"""Contains exceptions raised by the source control adapter."""


class SourceControlError(Exception):
    """Raised when the source control service cannot fulfil a request."""

    pass


class FileNotFoundInRepositoryError(SourceControlError):
    """Raised when a requested path does not exist on the synced branch."""

    pass
