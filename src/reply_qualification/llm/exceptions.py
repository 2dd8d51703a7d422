"""
Custom exceptions for the LLM client layer.

These exceptions wrap provider SDK errors so the API layer can map them to
HTTP status codes without depending on the SDK. Classification calls are
never retried; each of these surfaces once to the caller.
"""


class LLMClientError(Exception):
    """
    Base exception for all LLM client errors.

    All LLM-specific exceptions inherit from this to allow catching
    any LLM-related error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LLMConnectionError(LLMClientError):
    """
    Raised when unable to reach the provider.

    Includes network errors, DNS failures, connection resets, etc.
    """
    pass


class LLMTimeoutError(LLMConnectionError):
    """
    Raised when the provider call exceeds the configured timeout.

    Separate from generic connection errors so it can be reported as a
    gateway timeout.
    """
    pass


class LLMRateLimitError(LLMClientError):
    """Raised when the provider rate-limits the request (HTTP 429)."""
    pass


class LLMAuthenticationError(LLMClientError):
    """
    Raised when the provider rejects the resolved credential.

    Examples:
    - Revoked or malformed BYOK key
    - Key without access to the configured model
    """
    pass


class LLMGenerationError(LLMClientError):
    """
    Raised when the provider returns an error during generation.

    Examples:
    - Model not found
    - Overloaded (529)
    - Invalid parameters
    """
    pass
