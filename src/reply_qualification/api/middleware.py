"""FastAPI middleware for request tracing and access logging."""

import time
import uuid
from typing import Awaitable, Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Health and metrics scrapes are logged at debug level only
QUIET_PATHS = frozenset({"/health", "/metrics"})


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Bind a request id (and the caller org, if sent) to the structlog context.

    An incoming X-Request-ID is reused so ids propagate across services;
    otherwise a UUID4 is generated. The id is echoed on the response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        path = request.url.path
        log = logger.debug if path in QUIET_PATHS else logger.info

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )
        org_id = request.headers.get("x-org-id")
        if org_id:
            structlog.contextvars.bind_contextvars(header_org_id=org_id)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Request failed",
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        log(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        structlog.contextvars.clear_contextvars()
        return response
