"""
API-specific response models for FastAPI endpoints.

Field names are camelCase on the wire (alias generator) and snake_case in
Python.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from reply_qualification.models.enums import Classification, SourceTier
from reply_qualification.models.output_models import QualificationOutcome
from reply_qualification.persistence.orm import QualificationRow
from reply_qualification.persistence.repository import StatsSummary


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QualifyResponse(CamelModel):
    """Response for POST /qualify."""

    id: UUID = Field(description="Qualification id")
    request_id: UUID
    classification: Classification
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str
    suggested_action: str
    extracted_details: dict[str, Any]
    cost_usd: float
    key_source: SourceTier = Field(description="Credential tier that paid for the call")
    service_run_id: Optional[str] = Field(
        default=None,
        description="Run id in the runs service (null if run creation failed)",
    )
    created_at: datetime

    @classmethod
    def from_outcome(cls, outcome: QualificationOutcome) -> "QualifyResponse":
        result = outcome.result
        return cls(
            id=outcome.qualification_id,
            request_id=outcome.request_id,
            classification=result.classification,
            confidence=result.confidence,
            reasoning=result.reasoning,
            suggested_action=result.suggested_action,
            extracted_details=result.extracted_details,
            cost_usd=result.cost_usd,
            key_source=result.source_tier,
            service_run_id=outcome.service_run_id,
            created_at=outcome.created_at,
        )


class QualificationResponse(CamelModel):
    """Response for GET /qualifications/{id}."""

    id: UUID
    request_id: UUID
    classification: Classification
    confidence: float
    reasoning: Optional[str] = None
    suggested_action: Optional[str] = None
    extracted_details: dict[str, Any] = Field(default_factory=dict)
    cost_usd: float
    created_at: datetime

    @classmethod
    def from_row(cls, row: QualificationRow) -> "QualificationResponse":
        return cls(
            id=row.id,
            request_id=row.request_id,
            classification=row.classification,
            confidence=float(row.confidence),
            reasoning=row.reasoning,
            suggested_action=row.suggested_action,
            extracted_details=row.extracted_details or {},
            cost_usd=float(row.cost_usd or 0),
            created_at=row.created_at,
        )


class QualificationListItem(CamelModel):
    """One entry of GET /qualifications."""

    id: UUID
    request_id: UUID
    source_service: str
    source_org_id: str
    source_ref_id: Optional[str] = None
    from_email: str
    subject: Optional[str] = None
    classification: Classification
    confidence: float
    suggested_action: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_row(cls, row: QualificationRow) -> "QualificationListItem":
        request = row.request
        return cls(
            id=row.id,
            request_id=request.id,
            source_service=request.source_service,
            source_org_id=request.source_org_id,
            source_ref_id=request.source_ref_id,
            from_email=request.from_email,
            subject=request.subject,
            classification=row.classification,
            confidence=float(row.confidence),
            suggested_action=row.suggested_action,
            created_at=row.created_at,
        )


class StatsResponse(CamelModel):
    """Response for GET /stats."""

    total: int = Field(ge=0)
    by_classification: dict[str, int]
    total_cost_usd: float
    total_input_tokens: int
    total_output_tokens: int

    @classmethod
    def from_summary(cls, summary: StatsSummary) -> "StatsResponse":
        return cls(
            total=summary.total,
            by_classification=summary.by_classification,
            total_cost_usd=summary.total_cost_usd,
            total_input_tokens=summary.total_input_tokens,
            total_output_tokens=summary.total_output_tokens,
        )


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(description="Service status", examples=["ok"])
    service: str
    timestamp: datetime


class HealthDebugResponse(CamelModel):
    """Configuration flags for GET /health/debug. Never includes secret material."""

    api_key_configured: bool
    key_service_configured: bool
    runs_service_configured: bool
    database_connected: bool
    environment: str
    model: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str = Field(examples=["key_not_configured"])
    message: str
    details: Optional[dict[str, Any] | list[Any]] = None
    timestamp: datetime
