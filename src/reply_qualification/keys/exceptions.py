"""
Exceptions raised while resolving an upstream AI credential.

The HTTP layer does not inspect these types one by one; it asks
key_resolution_failure_reason() for a KeyResolutionFailure and picks the
status code from that.
"""

from enum import Enum
from typing import Optional


class KeyResolutionFailure(str, Enum):
    """Why a credential could not be resolved."""

    MISSING_ORG_ID = "missing_org_id"
    NOT_CONFIGURED = "not_configured"
    UPSTREAM_FAILURE = "upstream_failure"
    SERVICE_MISCONFIGURED = "service_misconfigured"


class KeyResolutionError(Exception):
    """
    Base exception for all credential resolution errors.

    Attributes:
        message: Human readable message (never contains key material)
        details: Extra context for logs and error bodies
        reason: KeyResolutionFailure category
    """

    reason: KeyResolutionFailure = KeyResolutionFailure.UPSTREAM_FAILURE

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MissingOrganizationError(KeyResolutionError):
    """
    Raised when keySource "byok" is requested without an organization id.

    Raised before any call to the key service is made.
    """

    reason = KeyResolutionFailure.MISSING_ORG_ID


class KeyNotConfiguredError(KeyResolutionError):
    """
    Raised when no key is configured for the requested scope(s).

    In explicit mode attempted_scopes has exactly one entry. In legacy
    fallback mode it lists every scope that reported "not configured".
    """

    reason = KeyResolutionFailure.NOT_CONFIGURED

    def __init__(
        self,
        message: str,
        attempted_scopes: list[str],
        details: dict | None = None,
    ):
        super().__init__(
            message,
            details={"attempted_scopes": list(attempted_scopes), **(details or {})},
        )
        self.attempted_scopes = list(attempted_scopes)


class KeyServiceError(KeyResolutionError):
    """
    Raised when the key service fails with anything other than "not found".

    Covers non-2xx responses (other than 404) and transport failures. The
    response body is kept as diagnostic text.
    """

    reason = KeyResolutionFailure.UPSTREAM_FAILURE

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        details: dict | None = None,
    ):
        super().__init__(
            message,
            details={"status_code": status_code, **(details or {})},
        )
        self.status_code = status_code
        self.body = body


class KeyServiceConfigurationError(KeyResolutionError):
    """Raised when this service has no key service API key configured."""

    reason = KeyResolutionFailure.SERVICE_MISCONFIGURED


def key_resolution_failure_reason(exc: BaseException) -> Optional[KeyResolutionFailure]:
    """
    Classify an exception raised during credential resolution.

    Returns:
        The KeyResolutionFailure for resolution errors, None for anything else
    """
    if isinstance(exc, KeyResolutionError):
        return exc.reason
    return None
