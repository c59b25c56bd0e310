"""Contains exceptions raised by the Mandrill API adapter."""


class MandrillAPIError(Exception):
    """Raised when the Mandrill API rejects a call."""

    def __init__(self, name: str, message: str, status_code: int | None = None) -> None:
        """Initializes the exception with the Mandrill error name and message."""
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message
        self.status_code = status_code


class UnknownTemplateError(MandrillAPIError):
    """Raised when a call refers to a template that does not exist."""

    pass
