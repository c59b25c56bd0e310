"""Custom exceptions for the notify module."""


class NotifyError(Exception):
    """Raised when the sync notification email could not be sent."""

    pass
