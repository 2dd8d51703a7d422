"""
FastAPI exception handlers for structured error responses.

Maps domain exceptions to appropriate HTTP status codes and formats. Every
body has the shape {error, message, details?, timestamp}; none of them carry
key material.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from reply_qualification.api.exceptions import APIError
from reply_qualification.keys.exceptions import (
    KeyResolutionError,
    KeyResolutionFailure,
    key_resolution_failure_reason,
)
from reply_qualification.llm.exceptions import (
    LLMClientError,
    LLMRateLimitError,
    LLMTimeoutError,
)

logger = structlog.get_logger(__name__)


KEY_RESOLUTION_STATUS: dict[KeyResolutionFailure, int] = {
    KeyResolutionFailure.MISSING_ORG_ID: status.HTTP_400_BAD_REQUEST,
    KeyResolutionFailure.NOT_CONFIGURED: 422,
    KeyResolutionFailure.UPSTREAM_FAILURE: status.HTTP_502_BAD_GATEWAY,
    KeyResolutionFailure.SERVICE_MISCONFIGURED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Any] = None,
) -> JSONResponse:
    content: dict[str, Any] = {
        "error": error,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle errors raised by routes and dependencies (401, 400, 404)."""
    logger.warning("API error", error=exc.error, message=exc.message)
    return error_response(exc.status_code, exc.error, exc.message, exc.details)


async def key_resolution_error_handler(request: Request, exc: KeyResolutionError) -> JSONResponse:
    """
    Handle credential resolution failures.

    Status depends on the failure reason:
    - missing_org_id: 400 (byok without orgId)
    - not_configured: 422 (no key for the requested scope(s))
    - upstream_failure: 502 (key service failed)
    - service_misconfigured: 500 (this service lacks its key service API key)
    """
    reason = key_resolution_failure_reason(exc) or KeyResolutionFailure.UPSTREAM_FAILURE
    status_code = KEY_RESOLUTION_STATUS[reason]

    logger.warning(
        "Key resolution error",
        reason=reason.value,
        status_code=status_code,
        details=exc.details,
    )

    # Upstream bodies are diagnostic only; keep them out of the response
    if reason in (KeyResolutionFailure.UPSTREAM_FAILURE, KeyResolutionFailure.SERVICE_MISCONFIGURED):
        message = "Failed to resolve API key from key-service"
        details = None
    else:
        message = exc.message
        details = exc.details

    return error_response(status_code, reason.value, message, details)


async def llm_rate_limit_error_handler(request: Request, exc: LLMRateLimitError) -> JSONResponse:
    """
    Handle provider rate limiting.

    Maps to 429 Too Many Requests.
    """
    logger.warning("LLM rate limit", details=exc.details)
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "llm_rate_limited",
        "Classification provider rate limit exceeded",
    )


async def llm_timeout_error_handler(request: Request, exc: LLMTimeoutError) -> JSONResponse:
    """
    Handle LLM timeout errors.

    Maps to 504 Gateway Timeout (upstream service timeout).
    """
    logger.error("LLM timeout error", error=exc.message)
    return error_response(
        status.HTTP_504_GATEWAY_TIMEOUT,
        "llm_timeout",
        "Classification provider request timed out",
    )


async def llm_error_handler(request: Request, exc: LLMClientError) -> JSONResponse:
    """
    Handle any other classification provider failure.

    Maps to 502 Bad Gateway (upstream service failed).
    """
    logger.error(
        "LLM call failed",
        error_type=type(exc).__name__,
        error=exc.message,
        details=exc.details,
    )
    return error_response(
        status.HTTP_502_BAD_GATEWAY,
        "llm_call_failed",
        "Classification provider call failed",
        {"error_type": type(exc).__name__},
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Handle invalid request bodies and query parameters.

    Maps to 400 Bad Request (client error).
    """
    logger.warning("Invalid request format", errors=len(exc.errors()))
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "invalid_request",
        "Request validation failed",
        exc.errors(),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred",
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    APIError: api_error_handler,
    KeyResolutionError: key_resolution_error_handler,
    LLMRateLimitError: llm_rate_limit_error_handler,
    LLMTimeoutError: llm_timeout_error_handler,
    LLMClientError: llm_error_handler,
    RequestValidationError: request_validation_error_handler,
    Exception: generic_error_handler,
}
