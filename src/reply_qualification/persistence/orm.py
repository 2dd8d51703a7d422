"""
ORM models for the Reply Qualification Service.

Tables:
- qualification_requests: one row per inbound POST /qualify
- qualifications: the classification of a request (1:1, cascades on delete)
- webhook_callbacks: pending callback rows for requests that supplied a webhookUrl
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional
import uuid

from sqlalchemy import (
    JSON,
    DateTime,
    Enum as SAEnum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from reply_qualification.models.enums import Classification


JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class QualificationRequestRow(Base):
    __tablename__ = "qualification_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Source identification
    source_service: Mapped[str] = mapped_column(String(255))
    source_org_id: Mapped[str] = mapped_column(String(255))
    source_ref_id: Mapped[Optional[str]] = mapped_column(String(255))

    # Identity and run tracking
    app_id: Mapped[Optional[str]] = mapped_column(String(255))
    org_id: Mapped[Optional[str]] = mapped_column(String(255))
    user_id: Mapped[Optional[str]] = mapped_column(String(255))
    brand_id: Mapped[Optional[str]] = mapped_column(String(255))
    campaign_id: Mapped[Optional[str]] = mapped_column(String(255))
    run_id: Mapped[Optional[str]] = mapped_column(String(255))  # parent run
    service_run_id: Mapped[Optional[str]] = mapped_column(String(255))
    key_source: Mapped[Optional[str]] = mapped_column(String(32))

    # Email content
    from_email: Mapped[str] = mapped_column(String(320))
    to_email: Mapped[str] = mapped_column(String(320))
    subject: Mapped[Optional[str]] = mapped_column(Text)
    body_text: Mapped[Optional[str]] = mapped_column(Text)
    body_html: Mapped[Optional[str]] = mapped_column(Text)
    in_reply_to_message_id: Mapped[Optional[str]] = mapped_column(String(998))
    email_received_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    qualification: Mapped[Optional["QualificationRow"]] = relationship(
        back_populates="request",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )

    __table_args__ = (
        Index("idx_requests_source", "source_service", "source_org_id"),
        Index("idx_requests_source_ref", "source_ref_id"),
        Index("idx_requests_org", "org_id"),
        Index("idx_requests_app", "app_id"),
        Index("idx_requests_brand", "brand_id"),
        Index("idx_requests_campaign", "campaign_id"),
        Index("idx_requests_run", "run_id"),
    )


class QualificationRow(Base):
    __tablename__ = "qualifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("qualification_requests.id", ondelete="CASCADE"),
        unique=True,
    )

    classification: Mapped[Classification] = mapped_column(
        SAEnum(
            Classification,
            name="classification",
            values_callable=lambda enum: [member.value for member in enum],
        )
    )
    confidence: Mapped[float] = mapped_column(Float)
    reasoning: Mapped[Optional[str]] = mapped_column(Text)
    suggested_action: Mapped[Optional[str]] = mapped_column(String(64))
    extracted_details: Mapped[dict[str, Any]] = mapped_column(JSONType, default=dict)

    # Usage & cost
    model: Mapped[str] = mapped_column(String(100))
    input_tokens: Mapped[int] = mapped_column(Integer)
    output_tokens: Mapped[int] = mapped_column(Integer)
    cost_usd: Mapped[Decimal] = mapped_column(Numeric(10, 6))
    source_tier: Mapped[str] = mapped_column(String(32))

    response_raw: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    request: Mapped[QualificationRequestRow] = relationship(back_populates="qualification")
    webhook_callbacks: Mapped[list["WebhookCallbackRow"]] = relationship(
        back_populates="qualification",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_qualifications_classification", "classification"),
        Index("idx_qualifications_created", "created_at"),
    )


class WebhookCallbackRow(Base):
    __tablename__ = "webhook_callbacks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    qualification_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("qualifications.id", ondelete="CASCADE"),
    )
    webhook_url: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(32), default="pending")
    attempts: Mapped[int] = mapped_column(Integer, default=0)
    last_attempt_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_error: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    qualification: Mapped[QualificationRow] = relationship(back_populates="webhook_callbacks")
