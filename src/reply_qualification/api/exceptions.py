"""HTTP-layer exceptions raised by routes and dependencies."""

from fastapi import status


class APIError(Exception):
    """
    Base exception for errors raised directly by the API layer.

    Attributes:
        status_code: HTTP status to respond with
        error: Machine-readable error code
        message: Human readable message
        details: Extra context
    """

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "bad_request"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class AuthenticationError(APIError):
    """Missing or invalid X-API-Key."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"


class InvalidRequestError(APIError):
    """Request is well-formed but not acceptable (e.g. unscoped stats query)."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "invalid_request"


class NotFoundError(APIError):
    """Requested resource does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"
