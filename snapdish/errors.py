"""Error taxonomy shared by the client and the reference server."""

from typing import Optional


class SnapDishError(Exception):
    """Base class for every error surfaced by this package."""


class InvalidInput(SnapDishError):
    pass


class NetworkError(SnapDishError):
    pass


class DecodeError(SnapDishError):
    pass


class ServerError(SnapDishError):
    """Non-2xx response. The raw body is kept for diagnostics."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFound(ServerError):
    """Unknown lobby, recipe or user, or a join code that resolves to nothing."""

    def __init__(self, message: str, status_code: Optional[int] = 404, body: str = "") -> None:
        super().__init__(message, status_code=status_code, body=body)


class GenerationNotAllowed(SnapDishError):
    pass


class SessionStateError(SnapDishError):
    pass
