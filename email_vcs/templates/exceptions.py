"""Custom exceptions for the templates module."""


class ParseError(Exception):
    """Raised when a markdown template cannot be converted into a template record."""

    pass
