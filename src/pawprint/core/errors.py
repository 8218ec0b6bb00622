"""Domain exceptions raised by services and mapped to HTTP responses.

Services raise these instead of ``HTTPException`` so the same code paths can
run outside a request (background tasks, realtime handlers). The application
registers a single handler that renders them as ``{"detail": message}``.
"""

from __future__ import annotations

from fastapi import status

GENERIC_ERROR_MESSAGE = "An unexpected error occurred, please try again later."


class PawprintError(RuntimeError):
    """Base exception for all Pawprint domain failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = GENERIC_ERROR_MESSAGE

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(PawprintError):
    """Raised when a credential is missing or cannot be resolved."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authorized."


class InvalidArgument(PawprintError):
    """Raised for malformed identifiers or request values."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request."


class NotFound(PawprintError):
    """Raised when a parent resource does not exist or is not owned."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."


class Forbidden(PawprintError):
    """Raised when the actor may not perform the action."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden."


class Internal(PawprintError):
    """Raised for classified store or upstream failures.

    The detail is shown to clients, so it must not carry internal state.
    """
