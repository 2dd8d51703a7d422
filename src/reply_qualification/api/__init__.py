"""
FastAPI API routes and endpoints.

- routes_qualify.py: POST /qualify, GET /qualifications, GET /qualifications/{id}
- routes_stats.py: GET /stats
- routes_health.py: GET /health, GET /health/debug
- auth.py: X-API-Key check and identity headers
- dependencies.py: Dependency injection for clients, database, service
- models.py: API-specific response models
- error_handlers.py: Exception handlers for structured error responses
"""

from reply_qualification.api import dependencies, error_handlers, models
from reply_qualification.api.routes_health import router as health_router
from reply_qualification.api.routes_qualify import router as qualify_router
from reply_qualification.api.routes_stats import router as stats_router

__all__ = [
    "health_router",
    "qualify_router",
    "stats_router",
    "dependencies",
    "error_handlers",
    "models",
]
