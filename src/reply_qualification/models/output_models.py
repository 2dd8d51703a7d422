"""
Output data models for the Reply Qualification Service.

QualificationResult is the normalized judgement produced by the invoker.
QualificationOutcome adds the persistence and run-tracking identifiers that
the HTTP layer returns to the caller.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from reply_qualification.models.enums import Classification, SourceTier


class QualificationResult(BaseModel):
    """
    Normalized classification of one email reply.

    Produced once per request and never mutated. source_tier is copied from
    the credential used for the call so cost logging can read it back
    without re-deriving it.
    """

    model_config = ConfigDict(frozen=True)

    classification: Classification = Field(..., description="One of the 8 reply classes")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Classifier confidence")
    reasoning: str = Field(default="", description="Short explanation from the model")
    suggested_action: str = Field(default="ignore", description="forward_to_client, auto_reply, ...")
    extracted_details: dict[str, Any] = Field(default_factory=dict)

    # Usage & cost
    model: str = Field(..., description="Model that produced the judgement")
    input_tokens: int = Field(..., ge=0)
    output_tokens: int = Field(..., ge=0)
    cost_usd: float = Field(..., ge=0.0)
    source_tier: SourceTier

    raw_provider_response: dict[str, Any] = Field(
        default_factory=dict,
        description="Provider message dump (for debugging)",
    )


class QualificationOutcome(BaseModel):
    """Result of QualificationService.qualify after persistence."""

    model_config = ConfigDict(frozen=True)

    qualification_id: UUID
    request_id: UUID
    result: QualificationResult
    service_run_id: Optional[str] = Field(
        default=None,
        description="Run id in the runs service (None if run creation failed)",
    )
    created_at: datetime
