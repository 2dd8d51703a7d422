"""Aggregated qualification statistics."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from reply_qualification.api.auth import require_api_key
from reply_qualification.api.dependencies import get_repository
from reply_qualification.api.exceptions import InvalidRequestError
from reply_qualification.api.models import ErrorResponse, StatsResponse
from reply_qualification.persistence.repository import QualificationRepository, StatsFilters

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.get(
    "/stats",
    response_model=StatsResponse,
    summary="Aggregated qualification statistics",
    responses={400: {"model": ErrorResponse, "description": "No filter given"}},
)
async def get_stats(
    app_id: Optional[str] = Query(None, alias="appId"),
    org_id: Optional[str] = Query(None, alias="orgId"),
    user_id: Optional[str] = Query(None, alias="userId"),
    brand_id: Optional[str] = Query(None, alias="brandId"),
    campaign_id: Optional[str] = Query(None, alias="campaignId"),
    run_id: Optional[str] = Query(None, alias="runId"),
    repository: QualificationRepository = Depends(get_repository),
) -> StatsResponse:
    filters = StatsFilters(
        app_id=app_id,
        org_id=org_id,
        user_id=user_id,
        brand_id=brand_id,
        campaign_id=campaign_id,
        run_id=run_id,
    )
    # Unscoped global queries are rejected
    if filters.is_empty():
        raise InvalidRequestError(
            "At least one filter parameter is required "
            "(appId, orgId, userId, brandId, campaignId, or runId)"
        )

    summary = await repository.aggregate_stats(filters)
    return StatsResponse.from_summary(summary)
