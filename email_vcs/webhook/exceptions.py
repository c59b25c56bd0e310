"""Custom exceptions for the webhook module."""


class ValidationError(Exception):
    """Raised when an inbound webhook request is rejected before any sync work."""

    def __init__(self, message: str, status_code: int) -> None:
        """Initializes the exception with the rejection reason and HTTP status code."""
        super().__init__(message)
        self.message = message
        self.status_code = status_code
