"""
Qualification service: the qualify() operation exposed to the HTTP layer.

Flow per request (strictly sequential):
1. Open a run (best effort)
2. Persist the request row
3. Resolve the credential (0-2 key service calls)
4. Classify (one provider call)
5. Record cost items and close the run (best effort)
6. Persist the qualification
"""

import structlog

from reply_qualification.keys.resolver import CredentialResolver
from reply_qualification.models.credential_models import CallerContext, IdentityContext
from reply_qualification.models.input_models import QualifyRequest
from reply_qualification.models.output_models import QualificationOutcome
from reply_qualification.persistence.repository import QualificationRepository
from reply_qualification.qualification.invoker import QualificationInvoker
from reply_qualification.runs.bookkeeping import RunBookkeeper
from reply_qualification.runs.client import RunParams


logger = structlog.get_logger(__name__)


class QualificationService:
    """Orchestrates resolver, invoker, run bookkeeping and persistence."""

    def __init__(
        self,
        resolver: CredentialResolver,
        invoker: QualificationInvoker,
        bookkeeper: RunBookkeeper,
        repository: QualificationRepository,
    ):
        self.resolver = resolver
        self.invoker = invoker
        self.bookkeeper = bookkeeper
        self.repository = repository

    async def qualify(
        self,
        request: QualifyRequest,
        identity: IdentityContext,
        caller: CallerContext,
    ) -> QualificationOutcome:
        """
        Qualify one email reply.

        Args:
            request: Validated request body
            identity: Org/user/app identity (body values, then headers)
            caller: Audit metadata for key service calls

        Returns:
            QualificationOutcome with persisted ids and the result

        Raises:
            KeyResolutionError: No usable credential (no AI spend happened)
            LLMClientError: The provider call failed (run marked failed)
        """
        run_params = RunParams(
            org_id=identity.org_id,
            user_id=identity.user_id,
            app_id=identity.app_id,
            brand_id=identity.brand_id,
            campaign_id=identity.campaign_id,
            parent_run_id=identity.parent_run_id,
        )

        async with self.bookkeeper.track(run_params) as run:
            structlog.contextvars.bind_contextvars(service_run_id=run.run_id)
            request_row = await self.repository.create_request(
                request, identity, service_run_id=run.run_id
            )
            credential = await self.resolver.resolve(identity, request.key_source, caller)
            result = await self.invoker.qualify(request.email_content(), credential)
            run.record_usage(result)

        webhook_url = str(request.webhook_url) if request.webhook_url else None
        qualification_row = await self.repository.save_qualification(
            request_row.id, result, webhook_url=webhook_url
        )

        logger.info(
            "Qualification completed",
            qualification_id=str(qualification_row.id),
            request_id=str(request_row.id),
            classification=result.classification.value,
            source_tier=result.source_tier.value,
        )

        return QualificationOutcome(
            qualification_id=qualification_row.id,
            request_id=request_row.id,
            result=result,
            service_run_id=run.run_id,
            created_at=qualification_row.created_at,
        )
