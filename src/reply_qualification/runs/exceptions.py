"""Exceptions for the runs service client."""

from typing import Optional


class RunsServiceError(Exception):
    """
    Raised when a call to the runs service fails.

    Covers non-2xx responses, transport errors and a missing service API key.
    The bookkeeping wrapper catches and logs these; they never reach the
    HTTP caller.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}
