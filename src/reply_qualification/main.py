"""
FastAPI application entry point for the Reply Qualification Service.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from reply_qualification.api.dependencies import (
    get_database,
    get_key_service_client,
    get_llm_client,
    get_runs_client,
    get_settings,
)
from reply_qualification.api.error_handlers import EXCEPTION_HANDLERS
from reply_qualification.api.middleware import RequestTracingMiddleware
from reply_qualification.api.routes_health import router as health_router
from reply_qualification.api.routes_qualify import router as qualify_router
from reply_qualification.api.routes_stats import router as stats_router
from reply_qualification.config import settings
from reply_qualification.logging_config import configure_logging

# Configure structured logging before any other imports
configure_logging(
    settings.LOG_LEVEL,
    settings.ENVIRONMENT,
    service_name=settings.SERVICE_NAME,
    version=settings.APP_VERSION,
)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown.

    The LLM client is built before anything else so an unsupported provider
    or an unpriced model aborts startup.
    """
    config = get_settings()
    logger.info(
        "Application startup",
        version=config.APP_VERSION,
        environment=config.ENVIRONMENT,
        model=config.ANTHROPIC_MODEL,
        key_service_url=config.KEY_SERVICE_URL,
        runs_service_url=config.RUNS_SERVICE_URL,
    )

    if not config.REPLY_QUALIFICATION_SERVICE_API_KEY:
        logger.warning("REPLY_QUALIFICATION_SERVICE_API_KEY not set, all requests will be rejected")
    if not config.KEY_SERVICE_API_KEY:
        logger.warning("KEY_SERVICE_API_KEY not set, credential resolution will fail")
    if not config.RUNS_SERVICE_API_KEY:
        logger.warning("RUNS_SERVICE_API_KEY not set, runs will not be tracked")

    llm_client = get_llm_client()

    database = get_database()
    if config.DB_AUTO_CREATE:
        await database.create_all()
    if await database.check_connection():
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed")

    logger.info("Application startup complete")
    yield

    logger.info("Application shutdown")
    try:
        await get_key_service_client().close()
        await get_runs_client().close()
        await llm_client.close()
    finally:
        await database.dispose()
        logger.info("Application shutdown complete")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Classifies replies to outreach emails and tracks their AI cost",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

# Include routers
app.include_router(health_router)
app.include_router(qualify_router, tags=["qualification"])
app.include_router(stats_router, tags=["stats"])


# Prometheus metrics instrumentation
if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "openapi": "/openapi.json",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "reply_qualification.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
