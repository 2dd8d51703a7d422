"""
Qualification API routes.

- POST /qualify: classify one email reply (synchronous)
- GET /qualifications/{id}: fetch one qualification
- GET /qualifications: list qualifications joined with their requests
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
import structlog

from reply_qualification.api.auth import (
    IdentityHeaders,
    caller_context_for,
    identity_for,
    require_api_key,
)
from reply_qualification.api.dependencies import (
    get_qualification_service,
    get_repository,
    get_settings,
)
from reply_qualification.api.exceptions import NotFoundError
from reply_qualification.api.models import (
    ErrorResponse,
    QualificationListItem,
    QualificationResponse,
    QualifyResponse,
)
from reply_qualification.config import Settings
from reply_qualification.models.input_models import QualifyRequest
from reply_qualification.persistence.repository import QualificationRepository
from reply_qualification.qualification.service import QualificationService

logger = structlog.get_logger(__name__)

router = APIRouter(dependencies=[Depends(require_api_key)])


@router.post(
    "/qualify",
    response_model=QualifyResponse,
    status_code=status.HTTP_200_OK,
    summary="Qualify an email reply",
    description="""
    Classify a single email reply with the AI classifier.

    Credential selection:
    - keySource=platform|byok|app uses only that key source
    - no keySource tries the org key (when orgId is known), then the app key

    Token costs are recorded against the run service with the tier that was
    actually used. Run service failures never fail this request.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request or byok without orgId"},
        401: {"model": ErrorResponse, "description": "Missing or invalid X-API-Key"},
        422: {"model": ErrorResponse, "description": "No API key configured for the requested scope"},
        429: {"model": ErrorResponse, "description": "Classification provider rate limit"},
        502: {"model": ErrorResponse, "description": "Key service or classification provider failed"},
        504: {"model": ErrorResponse, "description": "Classification provider timed out"},
    },
)
async def qualify(
    body: QualifyRequest,
    request: Request,
    headers: IdentityHeaders = Depends(),
    service: QualificationService = Depends(get_qualification_service),
    settings: Settings = Depends(get_settings),
) -> QualifyResponse:
    identity = identity_for(body, headers)
    caller = caller_context_for(request, settings.SERVICE_NAME)

    logger.info(
        "Qualify request received",
        source_service=body.source_service,
        source_ref_id=body.source_ref_id,
        org_id=identity.org_id,
        key_source=body.key_source.value if body.key_source else None,
    )

    outcome = await service.qualify(body, identity, caller)
    return QualifyResponse.from_outcome(outcome)


@router.get(
    "/qualifications/{qualification_id}",
    response_model=QualificationResponse,
    summary="Get a qualification by id",
    responses={404: {"model": ErrorResponse, "description": "Qualification not found"}},
)
async def get_qualification(
    qualification_id: UUID,
    repository: QualificationRepository = Depends(get_repository),
) -> QualificationResponse:
    row = await repository.get_qualification(qualification_id)
    if row is None:
        raise NotFoundError(
            "Qualification not found",
            details={"id": str(qualification_id)},
        )
    return QualificationResponse.from_row(row)


@router.get(
    "/qualifications",
    response_model=list[QualificationListItem],
    summary="List qualifications",
)
async def list_qualifications(
    source_service: Optional[str] = Query(None, alias="sourceService"),
    source_org_id: Optional[str] = Query(None, alias="sourceOrgId"),
    source_ref_id: Optional[str] = Query(None, alias="sourceRefId"),
    limit: int = Query(50, ge=1, le=500),
    repository: QualificationRepository = Depends(get_repository),
) -> list[QualificationListItem]:
    rows = await repository.list_qualifications(
        source_service=source_service,
        source_org_id=source_org_id,
        source_ref_id=source_ref_id,
        limit=limit,
    )
    return [QualificationListItem.from_row(row) for row in rows]
