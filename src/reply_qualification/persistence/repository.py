"""
Repository for qualification requests and results.

Storage Strategy:
- qualification_requests: inserted before key resolution, so failed
  requests are still recorded
- qualifications: inserted once the classification succeeded, 1:1 with its request
- webhook_callbacks: a pending row when the request carried a webhookUrl

Every write commits its own transaction.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.orm import selectinload
import structlog

from reply_qualification.models.credential_models import IdentityContext
from reply_qualification.models.input_models import QualifyRequest
from reply_qualification.models.output_models import QualificationResult
from reply_qualification.persistence.database import Database
from reply_qualification.persistence.orm import (
    QualificationRequestRow,
    QualificationRow,
    WebhookCallbackRow,
)


logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class StatsFilters:
    app_id: Optional[str] = None
    org_id: Optional[str] = None
    user_id: Optional[str] = None
    brand_id: Optional[str] = None
    campaign_id: Optional[str] = None
    run_id: Optional[str] = None

    def is_empty(self) -> bool:
        return not any(
            (self.app_id, self.org_id, self.user_id, self.brand_id, self.campaign_id, self.run_id)
        )


@dataclass
class StatsSummary:
    total: int = 0
    by_classification: dict[str, int] = field(default_factory=dict)
    total_cost_usd: float = 0.0
    total_input_tokens: int = 0
    total_output_tokens: int = 0


class QualificationRepository:
    """
    Repository for qualification requests, results and webhook callbacks.

    Uses the async SQLAlchemy session factory owned by Database.
    """

    def __init__(self, database: Database):
        """
        Initialize repository.

        Args:
            database: Database owning the engine and session factory
        """
        self.database = database

    async def create_request(
        self,
        request: QualifyRequest,
        identity: IdentityContext,
        service_run_id: Optional[str] = None,
    ) -> QualificationRequestRow:
        """
        Insert the inbound request.

        Args:
            request: Validated request body
            identity: Identity after header fallback (org/user/app ids)
            service_run_id: Run id in the runs service, if one was opened

        Returns:
            The persisted row (with id and created_at)
        """
        row = QualificationRequestRow(
            source_service=request.source_service,
            source_org_id=request.source_org_id,
            source_ref_id=request.source_ref_id,
            app_id=identity.app_id,
            org_id=identity.org_id,
            user_id=identity.user_id,
            brand_id=identity.brand_id,
            campaign_id=identity.campaign_id,
            run_id=identity.parent_run_id,
            service_run_id=service_run_id,
            key_source=request.key_source.value if request.key_source else None,
            from_email=str(request.from_email),
            to_email=str(request.to_email),
            subject=request.subject,
            body_text=request.body_text,
            body_html=request.body_html,
            in_reply_to_message_id=request.in_reply_to_message_id,
            email_received_at=request.email_received_at,
        )
        async with self.database.session() as session:
            session.add(row)
            await session.commit()

        logger.debug("Qualification request saved", request_id=str(row.id))
        return row

    async def save_qualification(
        self,
        request_id: uuid.UUID,
        result: QualificationResult,
        webhook_url: Optional[str] = None,
    ) -> QualificationRow:
        """
        Insert the classification for a request.

        A pending webhook_callbacks row is added in the same transaction when
        webhook_url is given.
        """
        row = QualificationRow(
            request_id=request_id,
            classification=result.classification,
            confidence=result.confidence,
            reasoning=result.reasoning,
            suggested_action=result.suggested_action,
            extracted_details=dict(result.extracted_details),
            model=result.model,
            input_tokens=result.input_tokens,
            output_tokens=result.output_tokens,
            cost_usd=Decimal(str(result.cost_usd)).quantize(Decimal("0.000001")),
            source_tier=result.source_tier.value,
            response_raw=result.raw_provider_response,
        )
        async with self.database.session() as session:
            session.add(row)
            if webhook_url:
                session.add(
                    WebhookCallbackRow(
                        qualification=row,
                        webhook_url=webhook_url,
                        status="pending",
                        attempts=0,
                    )
                )
            await session.commit()

        logger.info(
            "Qualification saved",
            qualification_id=str(row.id),
            request_id=str(request_id),
            classification=result.classification.value,
            webhook=bool(webhook_url),
        )
        return row

    async def get_qualification(self, qualification_id: uuid.UUID) -> Optional[QualificationRow]:
        async with self.database.session() as session:
            return await session.get(QualificationRow, qualification_id)

    async def list_qualifications(
        self,
        source_service: Optional[str] = None,
        source_org_id: Optional[str] = None,
        source_ref_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[QualificationRow]:
        """
        List qualifications joined with their requests, oldest first.

        Each returned row has its request relationship loaded.
        """
        stmt = (
            select(QualificationRow)
            .join(QualificationRow.request)
            .options(selectinload(QualificationRow.request))
            .order_by(QualificationRow.created_at)
            .limit(limit)
        )
        if source_service:
            stmt = stmt.where(QualificationRequestRow.source_service == source_service)
        if source_org_id:
            stmt = stmt.where(QualificationRequestRow.source_org_id == source_org_id)
        if source_ref_id:
            stmt = stmt.where(QualificationRequestRow.source_ref_id == source_ref_id)

        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def aggregate_stats(self, filters: StatsFilters) -> StatsSummary:
        """
        Aggregate counts, cost and tokens per classification.

        Filters are ANDed against the request row.
        """
        stmt = (
            select(
                QualificationRow.classification,
                func.count().label("count"),
                func.coalesce(func.sum(QualificationRow.cost_usd), 0).label("cost_usd"),
                func.coalesce(func.sum(QualificationRow.input_tokens), 0).label("input_tokens"),
                func.coalesce(func.sum(QualificationRow.output_tokens), 0).label("output_tokens"),
            )
            .join(QualificationRow.request)
            .group_by(QualificationRow.classification)
        )
        conditions = [
            (QualificationRequestRow.app_id, filters.app_id),
            (QualificationRequestRow.org_id, filters.org_id),
            (QualificationRequestRow.user_id, filters.user_id),
            (QualificationRequestRow.brand_id, filters.brand_id),
            (QualificationRequestRow.campaign_id, filters.campaign_id),
            (QualificationRequestRow.run_id, filters.run_id),
        ]
        for column, value in conditions:
            if value:
                stmt = stmt.where(column == value)

        async with self.database.session() as session:
            rows = (await session.execute(stmt)).all()

        summary = StatsSummary()
        for row in rows:
            summary.by_classification[row.classification.value] = int(row.count)
            summary.total += int(row.count)
            summary.total_cost_usd += float(row.cost_usd)
            summary.total_input_tokens += int(row.input_tokens)
            summary.total_output_tokens += int(row.output_tokens)
        return summary

    async def delete_request(self, request_id: uuid.UUID) -> bool:
        """
        Delete a request; its qualification and callbacks cascade.

        Returns:
            True if a row was deleted
        """
        async with self.database.session() as session:
            result = await session.execute(
                delete(QualificationRequestRow).where(QualificationRequestRow.id == request_id)
            )
            await session.commit()
        deleted = result.rowcount > 0
        logger.info("Qualification request deleted", request_id=str(request_id), deleted=deleted)
        return deleted
