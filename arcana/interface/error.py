"""Interface layer errors."""


class InterfaceError(Exception):
    """Base interface error."""

    pass


class APIError(InterfaceError):
    """An error that maps directly onto an HTTP response envelope.

    Attributes:
        status_code: HTTP status
        code: Machine-readable code for the client (e.g. NO_TOKEN)
        message: Human-readable message
    """

    def __init__(self, status_code: int, code: str, message: str) -> None:
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(message)
