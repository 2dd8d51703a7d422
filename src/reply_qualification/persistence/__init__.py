"""Persistence layer (SQLAlchemy async)."""

from reply_qualification.persistence.database import Database
from reply_qualification.persistence.orm import (
    Base,
    QualificationRequestRow,
    QualificationRow,
    WebhookCallbackRow,
)
from reply_qualification.persistence.repository import (
    QualificationRepository,
    StatsFilters,
    StatsSummary,
)

__all__ = [
    "Base",
    "Database",
    "QualificationRepository",
    "QualificationRequestRow",
    "QualificationRow",
    "StatsFilters",
    "StatsSummary",
    "WebhookCallbackRow",
]
